"""
Service instances for the site content collections.

Display names double as the subject of "<name> not found" messages, so they
read the way the dashboard words each collection.
"""

from app.models.content import BlogPost, Lab, PortfolioProject, Service, Testimonial
from app.services.resource_service import ResourceService

portfolio_service = ResourceService(PortfolioProject, display_name="Project")
blog_service = ResourceService(BlogPost, display_name="Post")
offering_service = ResourceService(Service, display_name="Service")
lab_service = ResourceService(Lab, display_name="Lab project")
testimonial_service = ResourceService(Testimonial, display_name="Testimonial")
