"""
Tests for the fixed window rate limiter.
"""

import unittest

from embed_agent.middlewares.rate_limiter import RateLimiter


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(max_requests=3, window_seconds=60, clock=self.clock)

    def test_budget_and_remaining(self):
        results = [self.limiter.hit('10.0.0.1') for _ in range(4)]

        self.assertEqual([allowed for allowed, _, _ in results], [True, True, True, False])
        self.assertEqual([remaining for _, remaining, _ in results], [2, 1, 0, 0])

    def test_reset_in_counts_down(self):
        self.limiter.hit('10.0.0.1')
        self.clock.now += 45

        _, _, reset_in = self.limiter.hit('10.0.0.1')

        self.assertEqual(reset_in, 15)

    def test_window_expiry_restores_budget(self):
        for _ in range(3):
            self.limiter.hit('10.0.0.1')
        self.assertFalse(self.limiter.hit('10.0.0.1')[0])

        self.clock.now += 60

        allowed, remaining, _ = self.limiter.hit('10.0.0.1')
        self.assertTrue(allowed)
        self.assertEqual(remaining, 2)

    def test_clients_are_counted_separately(self):
        for _ in range(3):
            self.limiter.hit('10.0.0.1')

        self.assertFalse(self.limiter.hit('10.0.0.1')[0])
        self.assertTrue(self.limiter.hit('10.0.0.2')[0])

    def test_reset(self):
        for _ in range(3):
            self.limiter.hit('10.0.0.1')

        self.limiter.reset()

        self.assertEqual(self.limiter.hit('10.0.0.1'), (True, 2, 60))

    def test_expired_windows_are_dropped(self):
        for index in range(1000):
            self.limiter.hit(f'10.0.{index // 256}.{index % 256}')
        self.assertEqual(len(self.limiter.windows), 1000)

        self.clock.now += 10000
        self.limiter.hit('192.168.0.1')

        self.assertEqual(list(self.limiter.windows), ['192.168.0.1'])

    def test_active_windows_survive_purge(self):
        self.limiter.hit('10.0.0.1')
        self.clock.now += 30
        self.limiter.hit('10.0.0.2')
        self.clock.now += 40

        self.limiter.hit('10.0.0.3')

        self.assertEqual(set(self.limiter.windows), {'10.0.0.2', '10.0.0.3'})
        self.assertEqual(self.limiter.windows['10.0.0.2'], (1030.0, 1))


if __name__ == '__main__':
    unittest.main()
