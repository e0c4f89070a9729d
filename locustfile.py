from locust import HttpUser, task, between

SAMPLE_ISSUES = [
    ("Desktop crash when printing large files", "Desktop"),
    ("Wifi slow in the staff room", "Access Point"),
    ("Projector needs maintenance before exams", "Projector"),
]

HISTORY = [
    {"status": "HARDWARE", "issueSummary": "printer roller broken"},
    {"status": "NETWORK", "issueSummary": "access point offline"},
    {"status": "MAINTENANCE", "issueSummary": "clean projector filters"},
]

class ClassifierUser(HttpUser):
    wait_time = between(0.2, 1.0)

    def _issue(self):
        return SAMPLE_ISSUES[self.environment.runner.stats.total.num_requests % len(SAMPLE_ISSUES)]

    @task(3)
    def classify(self):
        description, item_type = self._issue()
        self.client.post("/classify", json={"issueDescription": description, "itemType": item_type})

    @task(1)
    def classify_with_history(self):
        description, item_type = self._issue()
        self.client.post(
            "/classify/with-history",
            json={"issueDescription": description, "itemType": item_type, "workLogs": HISTORY},
        )

    @task(1)
    def readiness(self):
        self.client.get("/health/ready")
