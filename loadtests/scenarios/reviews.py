"""Review load test scenarios.

ReviewerJourney walks one reviewer through submitting and reading back
reviews. ReviewBrowserUser hammers the public read paths. ModerationReaderUser
reads the moderation queue and dashboard.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    MODERATION_FILTERS,
    SORTS,
    review_data,
    unique_user_id,
    vehicle_id,
    vote_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ReviewerState


class ReviewerJourney(SequentialTaskSet):
    """Submit -> List own reviews -> Vote on another -> Report it."""

    def on_start(self):
        self.state = ReviewerState(author_id=unique_user_id(), vehicle_id=vehicle_id())

    @task
    def submit(self):
        with self.client.post(
            f"/vehicles/{self.state.vehicle_id}/reviews",
            json=review_data(self.state.author_id),
            catch_response=True,
            name="POST /vehicles/{id}/reviews",
        ) as resp:
            if resp.status_code == 201:
                self.state.review_ids.append(resp.json()["review"]["id"])
            else:
                resp.failure(f"Submit failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def list_own_reviews(self):
        with self.client.get(
            f"/authors/{self.state.author_id}/reviews",
            catch_response=True,
            name="GET /authors/{id}/reviews",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Author listing failed: {resp.status_code} - {extract_error_detail(resp)}")
            elif resp.json()["pagination"]["total"] < 1:
                resp.failure("Submitted review missing from author listing")

    @task
    def vote_on_own_review_is_refused(self):
        with self.client.post(
            f"/reviews/{self.state.review_ids[-1]}/votes",
            json={"voter_id": self.state.author_id, "direction": "helpful"},
            catch_response=True,
            name="POST /reviews/{id}/votes (own)",
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Own vote not refused: {resp.status_code}")

    @task
    def report(self):
        with self.client.post(
            f"/reviews/{self.state.review_ids[-1]}/reports",
            json={"reporter_id": unique_user_id()},
            catch_response=True,
            name="POST /reviews/{id}/reports",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Report failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ReviewerUser(HttpUser):
    tasks = [ReviewerJourney]
    wait_time = between(0.5, 2)


class ReviewBrowserUser(HttpUser):
    """Public read traffic: vehicle listings and stats."""

    wait_time = between(0.2, 1)

    @task(5)
    def list_vehicle_reviews(self):
        self.client.get(
            f"/vehicles/{vehicle_id()}/reviews",
            params={"sort": random.choice(SORTS), "page": random.randint(1, 3)},
            name="GET /vehicles/{id}/reviews",
        )

    @task(3)
    def vehicle_stats(self):
        self.client.get(f"/vehicles/{vehicle_id()}/reviews/stats", name="GET /vehicles/{id}/reviews/stats")

    @task(1)
    def vote(self):
        """Vote on the newest review of a random vehicle, if it has one."""
        resp = self.client.get(
            f"/vehicles/{vehicle_id()}/reviews",
            params={"limit": 1},
            name="GET /vehicles/{id}/reviews (vote target)",
        )
        if resp.status_code != 200 or not resp.json()["items"]:
            return
        review_id = resp.json()["items"][0]["id"]
        self.client.post(f"/reviews/{review_id}/votes", json=vote_data(), name="POST /reviews/{id}/votes")


class ModerationReaderUser(HttpUser):
    """Moderation dashboard reads."""

    wait_time = between(1, 3)

    @task(3)
    def queue(self):
        self.client.get(
            "/moderation/reviews",
            params={"status": random.choice(MODERATION_FILTERS), "sort": random.choice(SORTS)},
            name="GET /moderation/reviews",
        )

    @task(1)
    def dashboard(self):
        self.client.get("/moderation/stats", name="GET /moderation/stats")
