from enum import Enum


class Role(str, Enum):
    TRAVELER = "traveler"
    SERVICE_PROVIDER = "service_provider"
    ADMIN = "admin"
