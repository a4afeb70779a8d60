from review_system.models.department import Department
from review_system.models.organization import Organization
from review_system.models.user import User

__all__ = [ "Department", "Organization", "User" ]
