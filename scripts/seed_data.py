"""
Seed script for the Shiftboard development database.

Creates one manager, one shift manager and four employees, a submission
deadline for next week and a few requests for the current week.

Run with: python -m scripts.seed_data
"""

import sys
from datetime import datetime, time, timedelta

from shiftboard.core.security import get_password_hash
from shiftboard.db import models  # noqa: F401
from shiftboard.db.database import Base, SessionLocal, engine
from shiftboard.db.models.credentials import Credentials
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.week_deadlines import WeekDeadlines
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.services.rules.types import RequestStatus, Role
from shiftboard.services.rules.weeks import offset_week, week_start_for


def clear_tables(db):
    """Delete all rows, children before parents."""
    print("Clearing tables...")
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()
    print("All tables cleared.")


USERS = [
    # id, email, name, role, password
    (1, "manager@shiftboard.local", "Dana Manager", Role.MANAGER, "manager123"),
    (2, "shiftlead@shiftboard.local", "Noa Lead", Role.SHIFT_MANAGER, "lead123"),
    (3, "employee1@shiftboard.local", "Avi Cohen", Role.EMPLOYEE, "employee123"),
    (4, "employee2@shiftboard.local", "Maya Levi", Role.EMPLOYEE, "employee123"),
    (5, "employee3@shiftboard.local", "Yossi Mizrahi", Role.EMPLOYEE, "employee123"),
    (6, "employee4@shiftboard.local", "Tamar Peretz", Role.EMPLOYEE, "employee123"),
]


def seed_users(db):
    print("Seeding users...")
    for user_id, email, name, role, password in USERS:
        db.add(Credentials(id=user_id, email=email, password_hash=get_password_hash(password)))
        # Seeded accounts keep their password, so no forced change on first login
        db.add(Profiles(id=user_id, email=email, name=name, role=role, must_change_password=False))
    db.commit()
    print(f"Seeded {len(USERS)} users.")


def seed_deadlines(db):
    print("Seeding deadlines...")
    next_week = offset_week(week_start_for(datetime.now().date()), 1)
    # Tuesday 12:00 before the week starts
    deadline = datetime.combine(next_week - timedelta(days=5), time(12, 0))
    db.add(WeekDeadlines(week_start=next_week, deadline=deadline, created_by=1))
    db.commit()
    print(f"Seeded deadline for week {next_week}.")


def seed_week_requests(db):
    print("Seeding week requests...")
    this_week = week_start_for(datetime.now().date())
    requests = [
        # Minimum only: 2 mornings + 1 noon
        WeekRequests(
            user_id=3,
            week_start=this_week,
            status=RequestStatus.PENDING,
            selections=[
                {"day_index": 0, "shift_id": "s1"},
                {"day_index": 1, "shift_id": "s2"},
                {"day_index": 2, "shift_id": "s4"},
            ],
        ),
        # Three mornings unlock nights
        WeekRequests(
            user_id=4,
            week_start=this_week,
            status=RequestStatus.APPROVED,
            reviewed_by_user_id=1,
            selections=[
                {"day_index": 0, "shift_id": "s1"},
                {"day_index": 1, "shift_id": "s1"},
                {"day_index": 3, "shift_id": "s3"},
                {"day_index": 2, "shift_id": "s4"},
                {"day_index": 4, "shift_id": "s6"},
                {"day_index": 5, "shift_id": "s9", "note": "Can start late"},
            ],
        ),
    ]
    db.add_all(requests)
    db.commit()
    print(f"Seeded {len(requests)} week requests.")


def main():
    print("\n" + "=" * 50)
    print("Shiftboard Database Seeder")
    print("=" * 50 + "\n")

    response = input("This will DELETE ALL EXISTING DATA. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(0)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        clear_tables(db)
        seed_users(db)
        seed_deadlines(db)
        seed_week_requests(db)

        print("\n" + "=" * 50)
        print("Seeding complete!")
        print("=" * 50)
        print("\nTest accounts:")
        print("  Manager:       manager@shiftboard.local / manager123")
        print("  Shift manager: shiftlead@shiftboard.local / lead123")
        print("  Employee:      employee1@shiftboard.local / employee123")
        print("                 (employees 2-4 follow same pattern)")
        print("=" * 50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
