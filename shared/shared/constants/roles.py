from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    # Machine callers such as the scheduled expiry sweep
    SERVICE = "service"
