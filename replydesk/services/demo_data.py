"""Seed a store with the demo account, its templates, integrations and a week of analytics."""
import logging
import random
from typing import Optional

from replydesk.schemas.analytics import AnalyticsCreate
from replydesk.schemas.integration import IntegrationCreate
from replydesk.schemas.template import TemplateCreate
from replydesk.schemas.user import User, UserCreate
from replydesk.storage.base import StorageBackend
from replydesk.utils.datetime import days_ago

logger = logging.getLogger(__name__)

DEMO_TEMPLATES = [
    {
        "name": "Project Inquiry",
        "category": "project",
        "subject": "Re: Project Inquiry",
        "content": (
            "Thank you for your interest in my services. I'd be happy to discuss your "
            "project requirements in detail. Could you please provide more information "
            "about your timeline and budget?"
        ),
        "variables": ["projectType", "timeline", "budget"],
        "success_rate": 96,
        "times_used": 34,
    },
    {
        "name": "Pricing Request",
        "category": "pricing",
        "subject": "Re: Pricing Information",
        "content": (
            "Thank you for reaching out. I'd be happy to provide a quote for your project. "
            "My rates vary based on project complexity and timeline. Let's schedule a "
            "brief call to discuss your needs."
        ),
        "variables": ["serviceType", "projectScope"],
        "success_rate": 89,
        "times_used": 28,
    },
    {
        "name": "Availability Check",
        "category": "availability",
        "subject": "Re: Availability Inquiry",
        "content": (
            "Thanks for your message. I currently have availability starting next week. "
            "I'd love to learn more about your project to see if we're a good fit. "
            "When would be convenient for a quick call?"
        ),
        "variables": ["startDate", "projectDuration"],
        "success_rate": 84,
        "times_used": 19,
    },
]

DEMO_INTEGRATIONS = [
    {
        "platform": "Gmail",
        "is_active": True,
        "credentials": {"email": "jane.smith@email.com"},
        "settings": {"autoReply": True, "categories": ["project", "pricing"]},
    },
    {
        "platform": "Slack",
        "is_active": True,
        "credentials": {"workspace": "freelance-team"},
        "settings": {"autoReply": False},
    },
]

ANALYTICS_DAYS = 7


def seed_demo_data(
    storage: StorageBackend,
    username: str,
    password: str,
    rng: Optional[random.Random] = None,
) -> User:
    """Create the demo owner and sample records unless the owner already exists."""
    existing = storage.get_user_by_username(username)
    if existing is not None:
        logger.info(f"[seed] demo user '{username}' already present, skipping")
        return existing

    rng = rng or random.Random()
    user = storage.create_user(UserCreate(username=username, password=password))

    for template in DEMO_TEMPLATES:
        storage.create_template(TemplateCreate(user_id=user.id, **template))

    for integration in DEMO_INTEGRATIONS:
        storage.create_integration(IntegrationCreate(user_id=user.id, **integration))

    for i in range(ANALYTICS_DAYS):
        row = storage.create_analytics(AnalyticsCreate(
            user_id=user.id,
            total_inquiries=rng.randint(5, 14),
            automated_responses=rng.randint(3, 10),
            manual_responses=rng.randint(1, 3),
            average_response_time=rng.randint(60, 359),
            customer_satisfaction=rng.randint(80, 99),
            time_saved=rng.randint(60, 179),
        ))
        # One row per day, today first
        storage.update_analytics(row.id, {"date": days_ago(i)})

    logger.info(
        f"[seed] demo user '{username}' with {len(DEMO_TEMPLATES)} templates, "
        f"{len(DEMO_INTEGRATIONS)} integrations, {ANALYTICS_DAYS} analytics rows"
    )
    return user
