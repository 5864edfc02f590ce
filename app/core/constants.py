from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    TRAINER = "trainer"
    EMPLOYEE = "employee"


# Directory listings sort admins first, employees last.
ROLE_ORDER = {
    RoleEnum.ADMIN: 0,
    RoleEnum.MANAGER: 1,
    RoleEnum.TRAINER: 2,
    RoleEnum.EMPLOYEE: 3,
}

VALID_ROLES = [role.value for role in RoleEnum]
