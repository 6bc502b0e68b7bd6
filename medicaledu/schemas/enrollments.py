# medicaledu/schemas/enrollments.py
from medicaledu.schemas.base import RequestBody


class ProgressBody(RequestBody):
    progress_percentage: int
