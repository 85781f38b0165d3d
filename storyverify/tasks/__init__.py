from storyverify.tasks.task import Task
from storyverify.tasks.verify import VerifyTask

__all__ = ['Task', 'VerifyTask']
