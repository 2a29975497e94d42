"""
LearnLink - terminal client for the LearnLink tutoring marketplace

Parents find and book tutors, tutors manage sessions and students,
admins moderate the platform. Everything goes through the LearnLink REST API.
"""

__version__ = "1.0.0"
