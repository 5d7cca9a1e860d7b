"""
Closed status and role sets, one per resource.

Columns store the `.value`; request schemas declare these enums so an
unknown value is rejected at the boundary with a field-level 400.
"""

import enum


class PublicationStatus(str, enum.Enum):
    """Portfolio projects, blog posts, labs and testimonials."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ServiceStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ContactStatus(str, enum.Enum):
    NEW = "new"
    REPLIED = "replied"
    CLOSED = "closed"


class SubscriberStatus(str, enum.Enum):
    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"


class SubmissionStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    CLOSED = "closed"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
    CLIENT = "client"
    GUEST = "guest"


# Roles allowed into the admin dashboard at all.
PORTAL_ROLES = frozenset({UserRole.ADMIN.value, UserRole.EDITOR.value, UserRole.VIEWER.value})
# Roles allowed to create/update/delete site content.
EDITOR_ROLES = frozenset({UserRole.ADMIN.value, UserRole.EDITOR.value})
