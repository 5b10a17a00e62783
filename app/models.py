from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Enum, Date, Time, DECIMAL
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
import enum

# =====================================================
# ENUMS
# =====================================================

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    LAWYER = "lawyer"
    ASSISTANT = "assistant"

class CaseStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"

class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class AssignmentRole(str, enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    ASSISTANT = "assistant"

# =====================================================
# USERS
# =====================================================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(30))
    role = Column(Enum(UserRole), nullable=False, default=UserRole.ASSISTANT, index=True)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    case_assignments = relationship("CaseUser", back_populates="user")
    assigned_tasks = relationship("Task", foreign_keys="Task.assigned_to", back_populates="assignee")
    activity_logs = relationship("ActivityLog", back_populates="user")

# =====================================================
# CLIENTS & CASES
# =====================================================

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(30))
    email = Column(String(255))
    address = Column(Text)
    national_id = Column(String(50))
    notes = Column(Text)
    created_at = Column(DateTime, default=func.now(), index=True)
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    cases = relationship("Case", back_populates="client")
    creator = relationship("User", foreign_keys=[created_by])

class Case(Base):
    __tablename__ = "cases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    status = Column(Enum(CaseStatus), nullable=False, default=CaseStatus.ACTIVE, index=True)
    court = Column(String(255))
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    start_date = Column(Date)
    end_date = Column(Date)
    description = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, default=func.now(), index=True)
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    client = relationship("Client", back_populates="cases")
    assignments = relationship("CaseUser", back_populates="case")
    sessions = relationship("CaseSession", back_populates="case")
    documents = relationship("Document", back_populates="case")
    invoices = relationship("Invoice", back_populates="case")
    tasks = relationship("Task", back_populates="case")
    creator = relationship("User", foreign_keys=[created_by])

class CaseUser(Base):
    __tablename__ = "case_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(50))
    assigned_at = Column(DateTime, default=func.now())

    # Relationships
    case = relationship("Case", back_populates="assignments")
    user = relationship("User", back_populates="case_assignments")

# =====================================================
# SESSIONS (HEARINGS & APPOINTMENTS)
# =====================================================

class CaseSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    location = Column(String(255))
    status = Column(Enum(SessionStatus), nullable=False, default=SessionStatus.SCHEDULED, index=True)
    notes = Column(Text)
    created_at = Column(DateTime, default=func.now())
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    case = relationship("Case", back_populates="sessions")
    creator = relationship("User", foreign_keys=[created_by])

# =====================================================
# DOCUMENTS
# =====================================================

class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_size = Column(Integer)
    file_type = Column(String(100))
    description = Column(Text)
    uploaded_at = Column(DateTime, default=func.now(), index=True)
    uploaded_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    case = relationship("Case", back_populates="documents")
    uploader = relationship("User", foreign_keys=[uploaded_by])

# =====================================================
# BILLING
# =====================================================

class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Nullable: standalone invoices, and invoices detached from a deleted case
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=True, index=True)
    amount = Column(DECIMAL(10, 2), nullable=False)
    description = Column(Text)
    paid = Column(Boolean, default=False, index=True)
    due_date = Column(Date)
    paid_date = Column(Date)
    created_at = Column(DateTime, default=func.now())
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    case = relationship("Case", back_populates="invoices")
    creator = relationship("User", foreign_keys=[created_by])

# =====================================================
# TASKS
# =====================================================

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(Enum(TaskStatus), nullable=False, default=TaskStatus.PENDING, index=True)
    priority = Column(String(20), default="medium")
    assigned_to = Column(Integer, ForeignKey("users.id"), index=True)
    case_id = Column(Integer, ForeignKey("cases.id"), index=True)
    due_date = Column(Date)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=func.now())
    created_by = Column(Integer, ForeignKey("users.id"))

    # Relationships
    case = relationship("Case", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_tasks")
    creator = relationship("User", foreign_keys=[created_by])

# =====================================================
# AUDIT
# =====================================================

class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    action = Column(String(100), nullable=False)
    target_type = Column(String(50), nullable=False)
    target_id = Column(Integer, nullable=False)
    details = Column(Text)
    created_at = Column(DateTime, default=func.now(), index=True)

    # Relationships
    user = relationship("User", back_populates="activity_logs")
