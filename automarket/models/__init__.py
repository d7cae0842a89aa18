from .base import Base
from .user import User, UserRole, Profile
from .store import Store
from .car import Car, CarStatus, Transmission, Fuel
from .photo import CarPhoto
from .car_view import CarView
from .message import Message
from .review import Review
from .transaction import Transaction, TransactionStatus
from .moderation_log import ModerationLog
from .bulk_import import BulkImportJob, BulkImportStatus
