#!/usr/bin/env python3
"""
Latency measurement script for the intake wizard endpoints
Measures GET /intake/paths/{client_type}, POST /intake/paths/{client_type}/visible
and POST /intake/validate against a running server
"""
import statistics
import sys
import time

import requests

API_BASE = "http://127.0.0.1:8000/api/v1"
DEVICE_ID = "latency-test-device"
CLIENT_TYPE = "ATHLETE_PERFORMANCE"
NUM_ITERATIONS = 10

SAMPLE_RESPONSES = {
    "full-name": "Latency Test",
    "email": "test@example.com",
    "competition-level": "college",
    "include-nutrition": "yes",
    "food-allergies": ["peanuts"],
}


def measure_endpoint(name: str, method: str, url: str, headers: dict, body: dict = None):
    """Measure latency for a single endpoint"""
    times = []
    errors = 0

    print(f"\nMeasuring {name}...")

    for i in range(NUM_ITERATIONS):
        start = time.perf_counter()
        try:
            response = requests.request(method, url, headers=headers, json=body, timeout=5)
            duration = (time.perf_counter() - start) * 1000
            times.append(duration)
            if response.status_code != 200:
                errors += 1
                print(f"  Iteration {i+1}: {response.status_code} - {duration:.2f}ms")
            else:
                print(f"  Iteration {i+1}: {duration:.2f}ms")
        except requests.RequestException as e:
            errors += 1
            duration = (time.perf_counter() - start) * 1000
            print(f"  Iteration {i+1}: ERROR - {e} ({duration:.2f}ms)")

    if not times:
        print(f"  ERROR: All requests failed for {name}")
        return None

    result = {
        'name': name,
        'avg': statistics.mean(times),
        'median': statistics.median(times),
        'min': min(times),
        'max': max(times),
        'p95': statistics.quantiles(times, n=20)[18] if len(times) > 1 else times[0],
        'errors': errors,
    }

    print(f"\n  Results for {name}:")
    print(f"    Average: {result['avg']:.2f}ms")
    print(f"    Median:  {result['median']:.2f}ms")
    print(f"    P95:     {result['p95']:.2f}ms")
    print(f"    Errors:  {errors}/{NUM_ITERATIONS}")
    return result


def main():
    """Run latency measurements"""
    headers = {
        'X-Device-ID': DEVICE_ID,
        'Content-Type': 'application/json'
    }

    # The path definition doubles as the question list for /intake/validate
    try:
        path_response = requests.get(f"{API_BASE}/intake/paths/{CLIENT_TYPE}", headers=headers, timeout=5)
        path_response.raise_for_status()
    except requests.RequestException as e:
        print(f"Could not load intake path {CLIENT_TYPE}: {e}")
        sys.exit(1)
    questions = [q for block in path_response.json()["blocks"] for q in block["questions"]]

    endpoints = [
        (f"GET /intake/paths/{CLIENT_TYPE}", "GET", f"{API_BASE}/intake/paths/{CLIENT_TYPE}", None),
        (
            f"POST /intake/paths/{CLIENT_TYPE}/visible", "POST",
            f"{API_BASE}/intake/paths/{CLIENT_TYPE}/visible", {"responses": SAMPLE_RESPONSES},
        ),
        (
            "POST /intake/validate", "POST",
            f"{API_BASE}/intake/validate", {"questions": questions, "responses": SAMPLE_RESPONSES},
        ),
    ]

    results = []
    for name, method, url, body in endpoints:
        result = measure_endpoint(name, method, url, headers, body)
        if result:
            results.append(result)

    # Summary
    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)
    if not results:
        print("No successful measurements")
        sys.exit(1)

    total_avg = sum(r['avg'] for r in results) / len(results)
    print(f"\nAverage latency across all endpoints: {total_avg:.2f}ms")
    print("\nPer-endpoint averages:")
    for r in results:
        print(f"  {r['name']:45} {r['avg']:7.2f}ms (median: {r['median']:.2f}ms)")


if __name__ == "__main__":
    main()
