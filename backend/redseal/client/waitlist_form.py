from __future__ import annotations

import logging
from typing import Any

import httpx

from redseal.client.locations import LocationDataClient
from redseal.schemas.waitlist import is_valid_email


log = logging.getLogger(__name__)

EMAIL_ERROR = "Please enter a valid email address"

FORM_FIELDS = (
    "email",
    "firstName",
    "lastName",
    "phone",
    "country",
    "province",
    "city",
    "trade",
    "is_apprentice",
    "apprenticeship_year",
    "is_challenging",
    "challenge_date",
    "company_name",
    "industry",
    "industry_other",
    "hiring_needs",
    "rcic_number",
    "experience_years",
    "mentor_trade",
    "years_experience",
    "certification_level",
)

# changing the key clears the dependent answers
DEPENDENT_FIELDS = {
    "is_apprentice": ("apprenticeship_year", "is_challenging", "challenge_date"),
    "is_challenging": ("challenge_date",),
}


class WaitlistForm:
    def __init__(
        self,
        user_type: str | None = None,
        *,
        base_url: str,
        locations: LocationDataClient | None = None,
        timeout: float | None = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport)
        self.locations = locations
        self.user_type = user_type or ""
        self.data: dict[str, str] = {f: "" for f in FORM_FIELDS}
        self.data["country"] = "Canada"
        self.email_error: str | None = None
        self.error: str | None = None
        self.is_submitting = False
        self.is_success = False

    def close(self) -> None:
        self._client.close()

    def set_field(self, name: str, value: str) -> None:
        if name not in self.data:
            raise KeyError(name)
        self.data[name] = value or ""
        for dep in DEPENDENT_FIELDS.get(name, ()):
            self.data[dep] = ""
        if name == "email":
            self.email_error = EMAIL_ERROR if value and not is_valid_email(value) else None
        elif name == "country":
            self._on_country_change(value)

    def _on_country_change(self, country_name: str) -> None:
        if self.locations is None:
            return
        country = self.locations.country_by_name(country_name)
        if country and self.locations.has_regions(country["code"]):
            self.locations.fetch_regions(country["code"])
            self.data["province"] = ""

    def payload(self) -> dict[str, Any]:
        name = f"{self.data['firstName']} {self.data['lastName']}".strip()
        return {**self.data, "user_type": self.user_type, "name": name}

    def submit(self) -> bool:
        if self.email_error:
            self.error = "Please fix the errors before submitting"
            return False

        self.is_submitting = True
        self.error = None
        try:
            r = self._client.post("/api/waitlist", json=self.payload())
            try:
                data = r.json()
            except ValueError:
                data = {}
            if r.status_code >= 400:
                self.error = str((data or {}).get("error_message") or "Failed to join waitlist")
                return False
            self.is_success = True
            return True
        except httpx.HTTPError as e:
            log.warning("waitlist submit failed: %s", type(e).__name__)
            self.error = "Something went wrong. Please try again."
            return False
        finally:
            self.is_submitting = False
