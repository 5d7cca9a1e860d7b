# Services package init
"""
Pixeloria Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database.
Why:   Routes handle HTTP; services handle rules, so both can be tested
       separately.

Service Inventory:
    - ResourceService:    generic list/get/create/update/delete per table
    - content_service:    instances for portfolio, blogs, services, labs,
                          testimonials
    - auth_service:       registration, login, admin user management
    - lead_service:       contact inquiries and newsletter subscriptions
    - estimate_service:   project cost calculator and submission records
    - dashboard_service:  admin overview counters
    - FileService:        image upload validation and storage

Services take the AsyncSession as an argument and keep no per-request
state, so module-level instances are shared safely across requests.
"""
