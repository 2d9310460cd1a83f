"""Data models for the authenticated session"""

from dataclasses import dataclass
from typing import Dict, Optional, Any
from enum import Enum


class Role(Enum):
    """User roles known to the backend"""
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


@dataclass
class UserProfile:
    """Profile of the logged-in user as returned by the backend"""
    id: int
    email: str
    name: str
    role: Role = Role.CUSTOMER
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_completed: Optional[bool] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend's wire format"""
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'username': self.username,
            'phone': self.phone,
            'address': self.address,
            'role': self.role.value,
            'profileCompleted': self.profile_completed
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserProfile':
        """Create UserProfile from dictionary

        Raises:
            KeyError, TypeError, ValueError: on missing or malformed fields
        """
        role = data.get('role') or Role.CUSTOMER.value
        return cls(
            id=int(data['id']),
            email=data['email'],
            name=data.get('name') or '',
            role=Role(role),
            first_name=data.get('firstName'),
            last_name=data.get('lastName'),
            username=data.get('username'),
            phone=data.get('phone'),
            address=data.get('address'),
            profile_completed=data.get('profileCompleted')
        )


@dataclass
class Session:
    """Authenticated identity paired with an access/refresh token pair

    All three fields are required; a partially filled session is never
    constructed.
    """
    access_token: str
    refresh_token: str
    user: UserProfile

    def __post_init__(self):
        if not self.access_token or not self.refresh_token:
            raise ValueError("Session requires both an access token and a refresh token")
        if self.user is None:
            raise ValueError("Session requires a user profile")

    @property
    def is_admin(self) -> bool:
        return self.user.is_admin

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accessToken': self.access_token,
            'refreshToken': self.refresh_token,
            'user': self.user.to_dict()
        }

    @classmethod
    def from_auth_response(cls, data: Dict[str, Any]) -> 'Session':
        """Create Session from the `data` of a login response"""
        return cls(
            access_token=data['accessToken'],
            refresh_token=data['refreshToken'],
            user=UserProfile.from_dict(data['user'])
        )
