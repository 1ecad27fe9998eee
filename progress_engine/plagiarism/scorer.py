"""
Plagiarism scorer

Compares a text submission with every other text submission of the same
assignment and writes the resulting report onto the submission record.
"""

import logging
from datetime import datetime

from progress_engine import config
from progress_engine.errors import SubmissionNotFound
from progress_engine.plagiarism.models import PlagiarismMatch, PlagiarismReport
from progress_engine.plagiarism.similarity import jaccard_similarity, longest_common_run
from progress_engine.scoring import round_half_up

logger = logging.getLogger(__name__)


class PlagiarismScorer:
    def __init__(
        self,
        submissions,
        min_similarity: int = config.PLAGIARISM_MIN_SIMILARITY,
        min_snippet_words: int = config.PLAGIARISM_MIN_SNIPPET_WORDS,
    ):
        self.submissions = submissions
        self.min_similarity = min_similarity
        self.min_snippet_words = min_snippet_words

    async def score(self, submission_id: str, text: str) -> PlagiarismReport:
        submission = await self.submissions.get_submission(submission_id)
        if submission is None:
            raise SubmissionNotFound(submission_id)

        # scoped to the same assignment, never course-wide
        candidates = await self.submissions.list_text_candidates(
            submission.assignment_id, exclude_submission_id=submission_id
        )

        matches = []
        for other in candidates:
            similarity = int(round_half_up(100 * jaccard_similarity(text, other.text)))
            if similarity < self.min_similarity:
                continue
            matches.append((other, similarity))
        matches.sort(key=lambda m: m[1], reverse=True)

        report_matches = []
        for rank, (other, similarity) in enumerate(matches):
            snippet = ""
            if rank == 0:
                snippet = longest_common_run(text, other.text, self.min_snippet_words)
            report_matches.append(PlagiarismMatch(
                submission_id=other.submission_id,
                student_name=other.student_name,
                similarity=similarity,
                matched_snippet=snippet,
            ))

        report = PlagiarismReport(
            submission_id=submission_id,
            similarity_score=report_matches[0].similarity if report_matches else 0,
            matches=report_matches,
            checked_at=datetime.utcnow(),
        )
        await self.submissions.save_plagiarism_report(report)
        logger.info(
            "Plagiarism report for %s: score=%s matches=%s",
            submission_id, report.similarity_score, len(report_matches),
        )
        return report
