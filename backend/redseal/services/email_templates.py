from __future__ import annotations

from datetime import datetime
from html import escape


USER_TYPE_LABELS = {
    "student": "Student/Apprentice",
    "employer": "Employer",
    "immigration_consultant": "Immigration Consultant",
    "international_worker": "International Student",
    "mentor": "Mentor/Instructor",
}

WELCOME_CONTENT: dict[str, dict[str, object]] = {
    "student": {
        "title": "exam preparation and career platform",
        "features": [
            "AI-powered Red Seal exam preparation",
            "Personalized study plans that adapt to you",
            "Thousands of practice questions",
            "Job matching after you pass",
            "Career guidance and mentorship",
        ],
    },
    "employer": {
        "title": "skilled trades recruitment platform",
        "features": [
            "Access verified skilled workers",
            "Post unlimited job openings",
            "Smart candidate matching by trade and location",
            "Direct messaging with candidates",
            "Skills assessment and exam scores",
        ],
    },
    "immigration_consultant": {
        "title": "immigration and trades platform",
        "features": [
            "Connect with pre-qualified international workers",
            "Track client exam prep progress",
            "Help clients secure job offers",
            "Earn referral revenue",
            "Verified RCIC profile badge",
        ],
    },
    "international_worker": {
        "title": "Canadian skilled trades immigration platform",
        "features": [
            "Study for Red Seal in 99 languages",
            "Get matched with sponsoring employers",
            "Find verified immigration consultants",
            "Understand credential recognition",
            "Settlement resources and community support",
        ],
    },
    "mentor": {
        "title": "mentorship and education platform",
        "features": [
            "Share your trade expertise with apprentices",
            "Flexible mentoring schedule",
            "Build your professional reputation",
            "Earn income from mentoring sessions",
            "Join a community of skilled tradespeople",
        ],
    },
}


def title_words(value: str) -> str:
    """`heavy_equipment` -> `Heavy Equipment`."""
    return " ".join(w[:1].upper() + w[1:] for w in str(value or "").split("_") if w)


def industry_display(industry: str | None, industry_other: str | None) -> str:
    if not industry:
        return ""
    if industry == "other" and industry_other:
        return f"Other ({industry_other})"
    return title_words(industry)


def hiring_needs_display(hiring_needs: str | None) -> str:
    if not hiring_needs:
        return ""
    return ", ".join(title_words(t) for t in hiring_needs.split(",") if t.strip())


def format_signup_time(value: str | None) -> str:
    if not value:
        return "Unknown"
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M %Z").strip()
    except ValueError:
        return escape(str(value))


def render_waitlist_welcome(*, name: str | None, user_type: str | None) -> tuple[str, str]:
    content = WELCOME_CONTENT.get(user_type or "student") or WELCOME_CONTENT["student"]
    greeting = f"Hi {escape(name)}" if name else "Welcome"
    items = "".join(f"<li>{escape(str(f))}</li>" for f in content["features"])  # type: ignore[union-attr]
    subject = "You're on the Red Seal Hub Waitlist! 🎉"
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #dc2626;">{greeting},</h1>
  <p>Thanks for joining the waitlist for Red Seal Hub, the {escape(str(content["title"]))}.</p>
  <p>Here's what you'll get when we launch:</p>
  <ul>{items}</ul>
  <p>We'll email you as soon as your spot is ready.</p>
  <p style="font-size: 12px; color: #6b7280;">Red Seal Hub</p>
</div>
"""
    return subject, html


def render_admin_waitlist_notification(data: dict[str, str | None]) -> tuple[str, str]:
    full_name = data.get("name") or " ".join(x for x in (data.get("first_name"), data.get("last_name")) if x) or "Unknown"
    location = ", ".join(x for x in (data.get("city"), data.get("province"), data.get("country")) if x) or "Not provided"
    user_type = data.get("user_type") or ""
    label = USER_TYPE_LABELS.get(user_type, user_type)

    details = ""
    if user_type in {"student", "international_worker"} and data.get("trade"):
        details += f"<p><strong>Trade:</strong> {escape(str(data['trade']))}</p>"
    if user_type == "employer":
        if data.get("company_name"):
            details += f"<p><strong>Company:</strong> {escape(str(data['company_name']))}</p>"
        ind = industry_display(data.get("industry"), data.get("industry_other"))
        if ind:
            details += f"<p><strong>Industry:</strong> {escape(ind)}</p>"
        needs = hiring_needs_display(data.get("hiring_needs"))
        if needs:
            details += f"<p><strong>Hiring For:</strong> {escape(needs)}</p>"

    email = escape(str(data.get("email") or ""))
    phone = f"<p><strong>Phone:</strong> {escape(str(data['phone']))}</p>" if data.get("phone") else ""
    subject = f"New Waitlist Signup: {full_name} ({label})"
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #dc2626;">New Waitlist Signup!</h2>
  <div style="background: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0; color: #1f2937;">Contact Information</h3>
    <p><strong>Name:</strong> {escape(full_name)}</p>
    <p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>
    {phone}
    <p><strong>Location:</strong> {escape(location)}</p>
  </div>
  <div style="background: #fef3c7; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0; color: #1f2937;">User Type Details</h3>
    <p><strong>User Type:</strong> {escape(label)}</p>
    {details}
  </div>
  <div style="background: #e5e7eb; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p style="margin: 0;"><strong>Signup Time:</strong> {format_signup_time(data.get("signup_time"))}</p>
  </div>
  <p style="font-size: 12px; color: #6b7280;">This is an automated notification from the Red Seal Hub waitlist system.</p>
</div>
"""
    return subject, html


def render_admin_signup_notification(
    *, user_id: str | None, email: str | None, first_name: str | None, last_name: str | None, signup_time: str | None
) -> tuple[str, str]:
    full_name = " ".join(x for x in (first_name, last_name) if x) or "Unknown"
    subject = f"New Signup: {full_name}"
    html = f"""
<h2>New User Signed Up!</h2>
<p><strong>Name:</strong> {escape(full_name)}</p>
<p><strong>Email:</strong> {escape(email or "")}</p>
<p><strong>User ID:</strong> {escape(user_id or "")}</p>
<p><strong>Signup Time:</strong> {format_signup_time(signup_time)}</p>
<hr />
<p><em>Note: User type and location will be available after they complete onboarding.</em></p>
"""
    return subject, html


def onboarding_type_label(user_type: str | None) -> str:
    if user_type == "international":
        return "International Student"
    if user_type == "student":
        return "Student"
    return USER_TYPE_LABELS.get(user_type or "", user_type or "")


def onboarding_location(
    *, home_country: str | None, target_province: str | None, city: str | None, province: str | None
) -> str:
    if home_country and home_country != "CA":
        return f"{home_country} → {target_province or '?'}, Canada"
    return f"{city or '?'}, {province or '?'}, Canada"


def render_admin_onboarding_notification(
    *,
    user_id: str,
    name: str,
    email: str,
    type_label: str,
    pathway_type: str | None,
    year_level: str | None,
    trade_name: str | None,
    location: str,
) -> tuple[str, str]:
    year = f"<p><strong>Year Level:</strong> {escape(year_level)}</p>" if year_level else ""
    subject = f"Onboarding Complete: {name} ({type_label})"
    html = f"""
<h2>User Completed Onboarding!</h2>
<p><strong>Name:</strong> {escape(name)}</p>
<p><strong>Email:</strong> {escape(email)}</p>
<p><strong>User Type:</strong> {escape(type_label)}</p>
<p><strong>Pathway:</strong> {escape(pathway_type or "")}</p>
{year}
<p><strong>Trade:</strong> {escape(trade_name or "")}</p>
<p><strong>Location:</strong> {escape(location)}</p>
<hr />
<p><small>User ID: {escape(user_id)}</small></p>
"""
    return subject, html
