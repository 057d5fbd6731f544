"""
Seed sample ministry activity for test@example.com and close the first months.
Run:  python seed_test_data.py
"""
import sys
from datetime import date

from app.infrastructure.db.session import get_session_factory
from app.infrastructure.db.models import User
from app.application.activities import CreateActivityUseCase
from app.application.persons import CreatePersonUseCase
from app.application.school_hours import CreateSchoolHoursUseCase
from app.application.reports import GenerateMonthlyReportUseCase
from app.domain.activity_entry import KIND_BIBLE_COURSE, KIND_PREACHING, KIND_SACRED_SERVICE

db = get_session_factory()()

user = db.query(User).filter(User.email == "test@example.com").first()
if not user:
    print("Run create_test_user.py first"); sys.exit(1)

BASE_YEAR = 2024

ana = CreatePersonUseCase(db).execute(account_id=user.id, name="Ana")
luis = CreatePersonUseCase(db).execute(account_id=user.id, name="Luis")

create = CreateActivityUseCase(db)
# September
create.execute(user.id, date(2024, 9, 5), KIND_PREACHING, start_time="09:00", end_time="10:30")
create.execute(user.id, date(2024, 9, 20), KIND_PREACHING, start_time="17:00", end_time="17:45")
create.execute(user.id, date(2024, 9, 10), KIND_SACRED_SERVICE, minutes=30, title="Limpieza del Salón")
create.execute(user.id, date(2024, 9, 12), KIND_BIBLE_COURSE, minutes=30, person_id=ana)
create.execute(user.id, date(2024, 9, 15), KIND_BIBLE_COURSE, minutes=30, person_id=ana)
# October
create.execute(user.id, date(2024, 10, 3), KIND_PREACHING, minutes=50)
create.execute(user.id, date(2024, 10, 8), KIND_BIBLE_COURSE, minutes=45, person_id=luis)

CreateSchoolHoursUseCase(db).execute(user.id, BASE_YEAR, 1, hours=12, title="Escuela del Servicio de Precursor")

generate = GenerateMonthlyReportUseCase(db)
for _ in range(2):
    r = generate.execute(account_id=user.id, period_year=BASE_YEAR, actor_user_id=user.id)
    print(f"Month {r.month_index}: {r.whole_hours}h, leftover {r.leftover_minutes}m, studies {r.distinct_studies}")

db.close()
