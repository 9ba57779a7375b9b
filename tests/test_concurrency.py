"""
tests/test_concurrency.py — Concurrent Access
===============================================
Every operation runs under the store lock, so concurrent callers never
lose updates.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor


class TestConcurrentViews:
    def test_no_lost_view_increments(self, forum, alice):
        thread = forum.create_thread("GENERAL", alice.id, "busy", "c")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: forum.get_thread(thread.id), range(400)))

        assert forum.get_thread(thread.id).views == 401

    def test_observed_views_are_distinct(self, forum, alice):
        thread = forum.create_thread("GENERAL", alice.id, "busy", "c")

        with ThreadPoolExecutor(max_workers=8) as pool:
            views = list(pool.map(lambda _: forum.get_thread(thread.id).views, range(200)))

        assert sorted(views) == list(range(1, 201))


class TestConcurrentPosting:
    def test_replies_and_reputation_consistent(self, forum, alice):
        thread = forum.create_thread("GENERAL", alice.id, "t", "c")
        users = [forum.register_user(f"u{i}") for i in range(10)]

        def post(n):
            user = users[n % len(users)]
            forum.add_reply(thread.id, user.id, f"reply {n}")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(post, range(100)))

        assert forum.get_thread(thread.id).reply_count == 100
        assert forum.get_statistics()["total_replies"] == 100
        assert forum.get_user(alice.id).stats.reputation == 5 + 100
        assert sum(forum.get_user(u.id).stats.posts for u in users) == 100

    def test_snapshot_during_writes(self, forum, alice):
        thread = forum.create_thread("GENERAL", alice.id, "t", "c")

        def write(n):
            forum.add_reply(thread.id, alice.id, str(n))

        def read(_):
            snap = forum.store.snapshot()
            t = snap.threads[0]
            # Counters and thread contents come from the same instant
            assert snap.counters.total_replies == t.reply_count

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(write, n) for n in range(50)]
            futures += [pool.submit(read, n) for n in range(50)]
            for f in futures:
                f.result()
