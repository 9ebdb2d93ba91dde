"""ReportReview: any signed-in user flags a review as inappropriate.

Reporting twice is harmless: only the first report is recorded.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from vehicle_reviews.domain import reviews
from vehicle_reviews.review.review import Review


@reviews.command(part_of="Review")
class ReportReview:
    review_id = Identifier(required=True)
    reporter_id = Identifier(required=True)


@reviews.command_handler(part_of=Review)
class ReportReviewHandler:
    @handle(ReportReview)
    def report_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.fetch(command.review_id)

        if review.report(reporter_id=command.reporter_id):
            repo.create(review)
            return True
        return False
