"""Vote storm: many voters on a handful of reviews at the same time.

Every VoteStormUser submits one review on start, then all users vote on the
shared reviews with fresh voter IDs. Each vote must be applied exactly once;
at the end the helpful+unhelpful counters of each review must equal the
number of votes the server reported as applied.
"""

import random
import threading

import requests
from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import review_data, unique_user_id, vehicle_id, vote_data
from loadtests.helpers.response import extract_error_detail

_lock = threading.Lock()
_applied: dict[str, int] = {}


class VoteStormUser(HttpUser):
    wait_time = constant_pacing(0.05)

    def on_start(self):
        author_id = unique_user_id()
        resp = self.client.post(
            f"/vehicles/{vehicle_id()}/reviews",
            json=review_data(author_id),
            name="[STORM] POST /vehicles/{id}/reviews",
        )
        if resp.status_code == 201:
            with _lock:
                _applied.setdefault(resp.json()["review"]["id"], 0)

    @task
    def vote(self):
        with _lock:
            targets = list(_applied)
        if not targets:
            return
        review_id = random.choice(targets)
        with self.client.post(
            f"/reviews/{review_id}/votes",
            json=vote_data(),
            catch_response=True,
            name="[STORM] POST /reviews/{id}/votes",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Vote failed: {resp.status_code} - {extract_error_detail(resp)}")
            elif resp.json()["applied"]:
                with _lock:
                    _applied[review_id] += 1


@events.test_stop.add_listener
def verify_counters(environment, **_kwargs):
    """Compare server counters with the votes reported as applied."""
    if not _applied or not environment.host:
        return
    mismatches = 0
    for review_id, expected in _applied.items():
        resp = requests.get(f"{environment.host}/moderation/reviews/{review_id}", timeout=5)
        if resp.status_code != 200:
            continue
        review = resp.json()["review"]
        if review["helpful_count"] + review["unhelpful_count"] != expected:
            mismatches += 1
            print(f"[STORM] Counter mismatch on {review_id}: expected {expected}")
    print(f"[STORM] Checked {len(_applied)} reviews, {mismatches} mismatches")
