from collections import deque
from typing import Deque, Optional

from extraction.facade import ExtractionFacade
from todo_ai.models import Todo

# In-memory storage for recently created tasks (for display purposes)
recent_tasks: Deque[Todo] = deque(maxlen=100)

# Global instance initialized at startup
facade: Optional[ExtractionFacade] = None
