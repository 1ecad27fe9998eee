from pydantic import BaseModel
from typing import List
from datetime import datetime

class PlagiarismMatch(BaseModel):
    submission_id: str
    student_name: str
    similarity: int  # percent
    matched_snippet: str = ""

class PlagiarismReport(BaseModel):
    submission_id: str
    similarity_score: int  # percent, max over matches
    matches: List[PlagiarismMatch] = []
    checked_at: datetime

class CandidateText(BaseModel):
    """Another text submission for the same assignment"""
    submission_id: str
    student_name: str = "Unknown"
    text: str
