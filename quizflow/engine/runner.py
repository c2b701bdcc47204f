"""QuizRunner for walking a quiz page by page, the way a respondent would."""

from typing import Iterable, List, Optional, Sequence

from quizflow.config import FlowConfig
from quizflow.core.ir import QUIZ_COMPLETE, FlowGraph, Page, Trigger
from quizflow.engine.resolver import resolve_next


class QuizRunner:
    """
    Tracks one respondent's position in a quiz and the pages visited so far.

    Each call to ``answer()`` resolves the next page from the trigger the
    respondent produced; ``back()`` returns to the previous page.
    """

    def __init__(self, graph: FlowGraph, pages: Sequence[Page], config: Optional[FlowConfig] = None):
        self.graph = graph
        self.pages = list(pages)
        self.config = config
        self.current_page_id: Optional[str] = None
        self.history: List[str] = []

    @property
    def is_complete(self) -> bool:
        return self.current_page_id == QUIZ_COMPLETE

    def start(self, page_id: Optional[str] = None) -> str:
        """Start on the given page, or the first page of the quiz."""
        if page_id is None:
            if not self.pages:
                raise ValueError("Quiz has no pages.")
            page_id = self.pages[0].id
        elif page_id not in {p.id for p in self.pages}:
            raise ValueError(f"Page {page_id} is not part of the quiz.")

        self.history = []
        self.current_page_id = page_id
        self._record_visit()
        return page_id

    def answer(self, trigger: Optional[Trigger] = None) -> str:
        """Leave the current page with ``trigger`` and move to the resolved page."""
        if self.current_page_id is None:
            raise RuntimeError("Runner not started.")
        if self.is_complete:
            return QUIZ_COMPLETE

        self.current_page_id = resolve_next(
            self.graph, self.current_page_id, self.pages, trigger, self.config
        )
        self._record_visit()
        return self.current_page_id

    def back(self) -> Optional[str]:
        """Return to the previously visited page; stays put on the first page."""
        if len(self.history) > 1:
            self.history.pop()
            self.current_page_id = self.history[-1]
        return self.current_page_id

    def _record_visit(self) -> None:
        if self.current_page_id:
            self.history.append(self.current_page_id)


def replay(
    graph: FlowGraph,
    pages: Sequence[Page],
    triggers: Iterable[Optional[Trigger]],
    start_page_id: Optional[str] = None,
    config: Optional[FlowConfig] = None,
) -> List[str]:
    """
    Rebuild a respondent's path from their logged answers.

    A ``None`` trigger means the respondent continued without answering.
    Replay stops early once the quiz is complete.
    """
    runner = QuizRunner(graph, pages, config)
    runner.start(start_page_id)
    for trigger in triggers:
        if runner.is_complete:
            break
        runner.answer(trigger)
    return list(runner.history)
