from app import create_app
from models import db
from utils.seeding import seed_degrees

app = create_app()

with app.app_context():
    db.create_all()
    degrees = seed_degrees()
    if degrees:
        app.logger.info("Seeded degrees: %s", ", ".join(d.name for d in degrees))
    else:
        app.logger.info("Degrees already seeded, nothing to do")
