"""
ORM models. Importing this package registers every table with
`Base.metadata`, which `initialize_database()` creates at boot.
"""

from app.models.content import BlogPost, Lab, PortfolioProject, Service, Testimonial
from app.models.inquiry import ContactInquiry, EstimateSubmission, NewsletterSubscriber
from app.models.user import User

__all__ = [
    "BlogPost",
    "ContactInquiry",
    "EstimateSubmission",
    "Lab",
    "NewsletterSubscriber",
    "PortfolioProject",
    "Service",
    "Testimonial",
    "User",
]
