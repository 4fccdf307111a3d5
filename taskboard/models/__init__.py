from taskboard.models.task import TaskRecord
from taskboard.models.comment import CommentRecord

__all__ = ["TaskRecord", "CommentRecord"]
