"""
Seed script - populates the database with sample data for development.

Usage:
    python -m scripts.seed

Idempotent: users that already exist are left alone, and their documents
are only created the first time.
"""
import asyncio
import sys
import os
from datetime import date, datetime, timezone

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import async_session_maker, init_db
from app.core.security import hash_password
from app.models.billing_details import BillingDetails
from app.models.cover_letter import CoverLetter
from app.models.job_application import JobApplication
from app.models.resume import Resume
from app.models.user import User
from sqlalchemy import select


# ─── Users ─────────────────────────────────────────────────────

TEST_USER = {
    "email": "dev@resumeforge.dev",
    "password": "password123",
    "full_name": "Priya Sharma",
}

ADMIN_USER = {
    "email": "admin@resumeforge.dev",
    "password": "admin12345",
    "full_name": "Admin User",
}

BILLING = {
    "full_name": "Priya Sharma",
    "address_line1": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "country": "IN",
    "postal_code": "560001",
    "phone": "+91 98765 43210",
}


# ─── Documents ─────────────────────────────────────────────────

RESUME_CONTENT = {
    "full_name": "Priya Sharma",
    "email": "dev@resumeforge.dev",
    "phone": "+91 98765 43210",
    "target_job_title": "Senior Backend Engineer",
    "city": "Bengaluru",
    "country": "India",
    "linkedin_url": "https://linkedin.com/in/priya-sharma",
    "summary": "<p>Backend engineer with 6 years building payment and data platforms in Python.</p>",
    "technical_skills": ["Python", "FastAPI", "PostgreSQL", "Redis", "Docker"],
    "soft_skills": ["Mentoring", "Communication"],
    "work_experience": [
        {
            "company": "Finlytics",
            "position": "Backend Engineer",
            "location": "Bengaluru",
            "start_date": "2020-04",
            "current": True,
            "achievements": [
                "Cut payment reconciliation time by 60% with an async ingestion pipeline",
                "Led migration of 40 services to PostgreSQL 15",
            ],
        },
    ],
    "education": [
        {
            "institution": "IIT Madras",
            "degree": "B.Tech",
            "field_of_study": "Computer Science",
            "end_date": "2018-05",
        },
    ],
}

COVER_LETTER = {
    "title": "Backend Engineer at Acme",
    "company": "Acme Corp",
    "job_title": "Senior Backend Engineer",
    "recipient_name": "Hiring Manager",
    "body": (
        "I am excited to apply for the Senior Backend Engineer role at Acme Corp.\n\n"
        "At Finlytics I built the payment pipelines that now process two million "
        "transactions a day.\n\n"
        "I would welcome the chance to discuss how I can help your platform team."
    ),
}

JOB_APPLICATIONS = [
    {
        "company": "Acme Corp",
        "job_title": "Senior Backend Engineer",
        "status": "interview",
        "priority": "high",
        "location": "Remote",
        "job_url": "https://acme.example.com/jobs/42",
        "applied_date": date(2024, 5, 1),
    },
    {
        "company": "Globex",
        "job_title": "Platform Engineer",
        "status": "applied",
        "priority": "medium",
        "location": "Bengaluru",
        "applied_date": date(2024, 5, 8),
    },
]


async def _get_or_create_user(db, data: dict, *, is_admin: bool = False) -> User:
    user = (await db.execute(select(User).where(User.email == data["email"]))).scalar_one_or_none()
    if user:
        print(f"  User {data['email']} already exists, skipping...")
        return user

    user = User(
        email=data["email"],
        password_hash=hash_password(data["password"]),
        full_name=data["full_name"],
        email_verified=True,
        is_admin=is_admin,
    )
    db.add(user)
    await db.flush()
    print(f"  Created user {data['email']}")
    return user


async def seed():
    """Run the seed process."""
    print("Seeding database...")

    await init_db()
    print("  Tables created")

    async with async_session_maker() as db:
        test_user = await _get_or_create_user(db, TEST_USER)
        await _get_or_create_user(db, ADMIN_USER, is_admin=True)

        # ── Billing ─────────────────────────────────────────
        existing = await db.execute(
            select(BillingDetails).where(BillingDetails.user_id == test_user.id)
        )
        if existing.scalar_one_or_none():
            print("  Billing details already exist, skipping...")
        else:
            db.add(BillingDetails(user_id=test_user.id, **BILLING))
            print("  Created billing details (IN -> Razorpay)")

        # ── Documents ───────────────────────────────────────
        existing = await db.execute(select(Resume).where(Resume.user_id == test_user.id).limit(1))
        if existing.scalar_one_or_none():
            print("  Documents already exist, skipping...")
        else:
            resume = Resume(
                user_id=test_user.id,
                title="Backend Resume",
                target_job_title=RESUME_CONTENT["target_job_title"],
                template="professional",
                is_draft=False,
                content=RESUME_CONTENT,
            )
            db.add(resume)
            await db.flush()

            letter = CoverLetter(user_id=test_user.id, resume_id=resume.id, **COVER_LETTER)
            db.add(letter)
            await db.flush()

            now = datetime.now(timezone.utc).isoformat()
            for app_data in JOB_APPLICATIONS:
                db.add(
                    JobApplication(
                        user_id=test_user.id,
                        resume_id=resume.id,
                        cover_letter_id=letter.id,
                        status_history=[{"status": app_data["status"], "changed_at": now, "note": None}],
                        **app_data,
                    )
                )
            print(f"  Created 1 resume, 1 cover letter, {len(JOB_APPLICATIONS)} job applications")

        await db.commit()

    print("Done.")
    print(f"  Login: {TEST_USER['email']} / {TEST_USER['password']}")
    print(f"  Admin: {ADMIN_USER['email']} / {ADMIN_USER['password']}")


if __name__ == "__main__":
    asyncio.run(seed())
