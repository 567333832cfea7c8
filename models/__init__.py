from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Import models
from models.degrees import Degree
from models.classrooms import Classroom
from models.students import Student
