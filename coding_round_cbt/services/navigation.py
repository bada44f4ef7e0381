"""
services/navigation.py

문제 이동/현황 추적. SessionState 위의 순수 상태 전이만 담당하며
draft 저장/로드는 컨트롤러가 앞뒤로 감싼다.

불변식:
  answered ⊆ visited ⊆ {1..total_questions}
  answered + visited_not_answered + not_visited == total_questions
"""

from coding_round_cbt.models.session_state import ExamStatus, SessionState, StatusCounters

ANSWERED = "answered"
VISITED = "visited"
NOT_VISITED = "not_visited"


class NavigationTracker:
    def __init__(self, state: SessionState):
        self.state = state

    def start(self, total_questions: int, duration: int) -> bool:
        if self.state.status != ExamStatus.NOT_STARTED:
            return False
        self.state.total_questions = total_questions
        self.state.remaining_seconds = duration
        self.state.visited.clear()
        self.state.answered.clear()
        self.state.status = ExamStatus.RUNNING
        if total_questions > 0:
            self.visit(1)
        return True

    def in_bounds(self, question_id: int) -> bool:
        return 1 <= question_id <= self.state.total_questions

    def visit(self, question_id: int) -> bool:
        if not self.in_bounds(question_id):
            return False
        self.state.visited.add(question_id)
        self.state.active_question = question_id
        return True

    def mark_answered(self) -> int:
        active = self.state.active_question
        # answered ⊆ visited 유지
        self.state.visited.add(active)
        self.state.answered.add(active)
        return active

    def has_next(self) -> bool:
        return self.state.active_question < self.state.total_questions

    def finish(self) -> bool:
        if self.state.status != ExamStatus.RUNNING:
            return False
        self.state.status = ExamStatus.FINISHED
        return True

    def counters(self) -> StatusCounters:
        answered = len(self.state.answered)
        visited = len(self.state.visited)
        return StatusCounters(
            answered=answered,
            visited_not_answered=visited - answered,
            not_visited=self.state.total_questions - visited,
        )

    def question_status(self, question_id: int) -> str:
        if question_id in self.state.answered:
            return ANSWERED
        if question_id in self.state.visited:
            return VISITED
        return NOT_VISITED
