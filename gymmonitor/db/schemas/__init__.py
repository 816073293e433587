from .auth import AuthCheck, LoginRequest, MessageResponse, SignUpRequest, TokenResponse
from .gym_class import GymClassCreate, GymClassDetails, StaffScheduleEntry, TimetableEntry
from .member import BookingSummary, Dashboard, MembershipDetails
from .staff import ClubMembersOverview, MemberOverview
