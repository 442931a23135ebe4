"""
Seed script — dispatches a few sample compression jobs for demo purposes.

Usage:
    python -m scripts.generate_sample_image   (writes the originals first)
    python -m scripts.seed_jobs

This creates:
- 2 image jobs for the originals written by generate_sample_image
- 1 job with the configured default levels (no levels sent)
- 1 job for a media type without a handler (demos a FAILED archive entry)

Then it prints the queue, the processing state and the archive.
"""

import httpx

BASE_URL = "http://localhost:1613"


def seed():
    client = httpx.Client(base_url=BASE_URL, timeout=10.0)

    jobs = [
        {
            "basePath": "/demo/object-1",
            "objectUid": "object-1",
            "mediaUid": "sample-jpeg",
            "title": "Sample JPEG",
            "mimeType": "image/jpeg",
            "levels": [1000, "Automatic"],
        },
        {
            "basePath": "/demo/object-1",
            "objectUid": "object-1",
            "mediaUid": "sample-png",
            "title": "Sample PNG",
            "mimeType": "image/png",
            "notificationEmail": "ops@example.org",
            "levels": ["Automatic"],
        },
        {
            "basePath": "/demo/object-2",
            "objectUid": "object-2",
            "mediaUid": "sample-jpeg",
            "title": "Default levels",
            "mimeType": "image/jpeg",
        },
        {
            "basePath": "/demo/object-3",
            "objectUid": "object-3",
            "mediaUid": "statue",
            "title": "Unsupported model (will fail)",
            "mimeType": "model/obj",
            "levels": [5000, 50000],
        },
    ]

    print(f"Dispatching {len(jobs)} jobs to {BASE_URL}...\n")

    for job in jobs:
        resp = client.post("/jobs/dispatch", json=job)
        resp.raise_for_status()
        print(f"  [{resp.json()['id']}] {job['title']}")

    state = client.get("/control/state").json()["state"]
    print(f"\nProcessing state: {state}")
    if state != "RUNNING":
        print("Start processing:  curl -X PUT -d '{\"state\": \"RUN\"}' "
              "-H 'Content-Type: application/json' http://localhost:1613/control/state")
    print("Queue:    curl http://localhost:1613/jobs/queue")
    print("Archive:  curl http://localhost:1613/archive/jobs")


if __name__ == "__main__":
    seed()
