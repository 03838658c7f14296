# =============================================================================
# greenmaster_core/models/enums.py
# Enumerations shared by the GreenMaster entities
# =============================================================================

from enum import Enum, IntEnum


class Department(Enum):
    SALES = "영업"
    RESEARCH = "연구소"        # field trials
    CONSTRUCTION = "건설사업"  # estimates, construction
    CONSULTING = "컨설팅"
    MANAGEMENT = "관리"        # HR moves etc.


class UserRole(Enum):
    SENIOR = "상급자 (Senior)"
    INTERMEDIATE = "중급자 (Intermediate)"
    JUNIOR = "하급자 (Junior)"
    ADMIN = "시스템 관리자 (Admin)"  # legacy, behaves like SENIOR


class UserStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class CourseType(Enum):
    MEMBER = "회원제"
    PUBLIC = "대중제"


class GrassType(Enum):
    ZOYSIA = "한국잔디"
    BENTGRASS = "벤트그라스"
    KENTUCKY = "캔터키블루그라스"
    MIXED = "혼합"


class AffinityLevel(IntEnum):
    HOSTILE = -2
    UNFRIENDLY = -1
    NEUTRAL = 0
    FRIENDLY = 1
    ALLY = 2


class EventType(Enum):
    MEETING = "MEETING"
    VISIT = "VISIT"
    CONSTRUCTION = "CONSTRUCTION"
    OTHER = "OTHER"


class EventSource(Enum):
    GOOGLE = "Google"
    OUTLOOK = "Outlook"
    MANUAL = "Manual"


class MaterialCategory(Enum):
    PESTICIDE = "농약"
    FERTILIZER = "비료"
    GRASS = "잔디/종자"
    MATERIAL = "기타자재"


class AuditAction(Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class AuditTarget(Enum):
    LOG = "LOG"
    COURSE = "COURSE"
    PERSON = "PERSON"
    USER = "USER"
    FINANCE = "FINANCE"
    MATERIAL = "MATERIAL"
    EVENT = "EVENT"
    TODO = "TODO"
