"""
Database Schemas for the Portfolio API

All documents live in one MongoDB collection and are told apart by the
`type` field:
- "main": the profile (exactly one)
- "counter": the visitor counter (exactly one)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

PROFILE_TYPE = "main"
COUNTER_TYPE = "counter"

# Content seeded into the profile the first time the server starts
DEFAULT_PROFILE = {
    "name": "Your Name",
    "title": "Software Developer",
    "location": "Earth",
    "email": "you@example.com",
    "bio": "I build things for the web.",
    "skills": ["Python", "FastAPI", "MongoDB", "JavaScript"],
    "experience": "Add your experience here.",
    "projects": [],
}


# Stored documents
class Project(BaseModel):
    id: str
    name: str
    description: str = ""
    createdAt: datetime


class Profile(BaseModel):
    type: str = Field(default=PROFILE_TYPE)
    name: str
    title: str
    location: str
    email: str
    bio: str
    skills: List[str] = []
    experience: str = ""
    projects: List[Project] = []
    createdAt: datetime
    updatedAt: datetime


# Request bodies
class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None


class ProjectCreate(BaseModel):
    name: str
    description: str = ""


# Responses
class UpdateProfileResponse(BaseModel):
    success: bool = True
    message: str
    updatedAt: datetime


class AddProjectResponse(BaseModel):
    success: bool = True
    message: str
    project: Project


class VisitorCount(BaseModel):
    visitorCount: int
