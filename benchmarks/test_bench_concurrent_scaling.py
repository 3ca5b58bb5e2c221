"""
Benchmark: Concurrent Request Scaling

Measures how the rate limited client scales with increasing numbers of
threads sharing one limiter. Useful for spotting lock contention in the
per-bucket locking.

Usage:
    uv run pytest benchmarks/test_bench_concurrent_scaling.py -v -s --no-cov
"""

import statistics
import threading
import time
from typing import List, Tuple

from llm_ratelimit.client import RateLimitedClient


class TestConcurrentScaling:
    """Test how the client scales with concurrent threads."""

    def test_scaling_at_thread_counts(
        self,
        benchmark_client,
        benchmark_model,
        unlimited_limiter,
        recording_delay,
    ):
        """
        Measure throughput at different thread counts.

        Throughput is not expected to grow with threads (the GIL serializes
        the work); it must not collapse either.
        """
        client = RateLimitedClient(
            benchmark_client, unlimited_limiter, delay=recording_delay
        )
        requests_per_thread = 200
        thread_counts = [1, 2, 4, 8, 16]
        results: List[Tuple[int, float]] = []

        for thread_count in thread_counts:
            barrier = threading.Barrier(thread_count + 1)

            def worker():
                barrier.wait()
                for _ in range(requests_per_thread):
                    client.request(benchmark_model, "Hello world")

            round_times = []
            for _ in range(3):
                threads = [threading.Thread(target=worker) for _ in range(thread_count)]
                for t in threads:
                    t.start()
                start = time.perf_counter()
                barrier.wait()
                for t in threads:
                    t.join()
                round_times.append(time.perf_counter() - start)

            total = thread_count * requests_per_thread
            results.append((thread_count, total / statistics.mean(round_times)))

        print("\n--- Concurrent Scaling Results ---")
        print(f"{'Threads':>8} | {'Throughput':>12}")
        print(f"{'-'*8}-+-{'-'*12}")
        for threads_used, throughput in results:
            print(f"{threads_used:>8} | {throughput:>10.1f}/s")

        single_throughput = results[0][1]
        worst_throughput = min(r[1] for r in results)
        assert worst_throughput >= single_throughput * 0.25, (
            "Throughput collapsed under concurrency"
        )
        assert recording_delay.count == 0
