from datetime import date, timedelta
from itertools import count
from models import db, Degree, Classroom, Student

DEGREES = [
    {"name": "Bachelor", "max_year": 4},
    {"name": "Master", "max_year": 2},
    {"name": "PhD", "max_year": 4},
]
CLASSROOMS_PER_DEGREE = 7
MALE_STUDENTS = 10
FEMALE_STUDENTS = 5

FIRST_NAMES = {
    "male": ["Luca", "Marco", "Ahmed", "Jonas", "Mateo", "Noah", "Kenji", "Omar", "Pavel", "Tomas"],
    "female": ["Giulia", "Sara", "Amira", "Lena", "Yuki"],
}
LAST_NAMES = ["Rossi", "Bianchi", "Costa", "Moreau", "Novak", "Silva", "Tanaka", "Weber", "Haddad", "Larsen"]

# Everyone is born a few years before the cutoff
OLDEST_BIRTHDAY = date(1996, 1, 1)


def _students_for(classroom, counter):
    students = []
    genders = ["male"] * MALE_STUDENTS + ["female"] * FEMALE_STUDENTS
    for gender in genders:
        n = next(counter)
        first_name = FIRST_NAMES[gender][n % len(FIRST_NAMES[gender])]
        last_name = LAST_NAMES[n % len(LAST_NAMES)]
        students.append(Student(
            classroom_id=classroom.id,
            first_name=first_name,
            last_name=last_name,
            email=f"{first_name}.{last_name}.{n}@example.edu".lower(),
            gender=gender,
            date_of_birth=OLDEST_BIRTHDAY + timedelta(days=(n * 37) % 3000),
        ))
    return students


def seed_degrees():
    """Create the default degrees with their classrooms and students.

    Returns the created degrees. Degrees whose name already exists are skipped.
    """
    counter = count(1)
    created = []
    for values in DEGREES:
        if Degree.query.filter_by(name=values["name"]).first():
            continue
        degree = Degree(**values)
        db.session.add(degree)
        db.session.flush()

        for i in range(CLASSROOMS_PER_DEGREE):
            classroom = Classroom(name=f"{degree.name[0]}{i + 1}", degree_id=degree.id)
            db.session.add(classroom)
            db.session.flush()
            db.session.add_all(_students_for(classroom, counter))

        created.append(degree)

    db.session.commit()
    return created
