from .club import Club, Location
from .membership_plan import MembershipPlan
from .user import User, UserRole
from .gym_class import GymClass
from .booking import Booking, BookingStatus
from .visit import Visit
