from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WelcomeEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    name: str | None = None
    user_type: str | None = Field(default=None, alias="userType")


class AdminWaitlistNotificationRequest(BaseModel):
    email: str | None = None
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    user_type: str | None = None
    trade: str | None = None
    country: str | None = None
    province: str | None = None
    city: str | None = None
    phone: str | None = None
    company_name: str | None = None
    industry: str | None = None
    industry_other: str | None = None
    hiring_needs: str | None = None
    signup_time: str | None = None


class AdminSignupNotificationRequest(BaseModel):
    user_id: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    signup_time: str | None = None


class AdminOnboardingNotificationRequest(BaseModel):
    clerk_user_id: str
    user_type: str | None = None
    pathway_type: str | None = None
    trade: str | None = None
    city: str | None = None
    province: str | None = None
    home_country: str | None = None
    target_province: str | None = None
    year_level: str | None = None


class KlaviyoSyncRequest(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    user_type: str | None = None
    trade: str | None = None
    country: str | None = None
    province: str | None = None
    city: str | None = None
    company_name: str | None = None
    industry: str | None = None
    industry_other: str | None = None
    hiring_needs: str | None = None


class NotificationResponse(BaseModel):
    success: bool
    id: str | None = None


class KlaviyoSyncResponse(BaseModel):
    success: bool
    profile_id: str | None = None
