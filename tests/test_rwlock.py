import threading
import time
import unittest

from welford import ReadWriteLock


TIMEOUT = 5


class TestReadWriteLock(unittest.TestCase):

    def setUp(self):
        self.uut = ReadWriteLock()

    def test_readers_share_the_lock(self):
        # Both readers must be inside the read section at once to pass
        barrier = threading.Barrier(2, timeout=TIMEOUT)
        errors = []

        def reader():
            with self.uut.read_locked():
                try:
                    barrier.wait()
                except threading.BrokenBarrierError as e:
                    errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(TIMEOUT)
        self.assertEqual(errors, [])
        self.assertEqual(self.uut.readers, 0)

    def test_writer_excludes_readers(self):
        entered = threading.Event()
        self.uut.acquire_write()

        def reader():
            with self.uut.read_locked():
                entered.set()

        t = threading.Thread(target=reader)
        t.start()
        self.assertFalse(entered.wait(0.05))
        self.uut.release_write()
        self.assertTrue(entered.wait(TIMEOUT))
        t.join(TIMEOUT)

    def test_reader_excludes_writer(self):
        entered = threading.Event()
        self.uut.acquire_read()

        def writer():
            with self.uut.write_locked():
                entered.set()

        t = threading.Thread(target=writer)
        t.start()
        self.assertFalse(entered.wait(0.05))
        self.uut.release_read()
        self.assertTrue(entered.wait(TIMEOUT))
        t.join(TIMEOUT)

    def test_waiting_writer_blocks_new_readers(self):
        order = []
        self.uut.acquire_read()

        def writer():
            with self.uut.write_locked():
                order.append('writer')

        def reader():
            with self.uut.read_locked():
                order.append('reader')

        w = threading.Thread(target=writer)
        w.start()
        deadline = time.monotonic() + TIMEOUT
        while not self.uut._writers_waiting and time.monotonic() < deadline:
            time.sleep(0.001)
        r = threading.Thread(target=reader)
        r.start()
        time.sleep(0.05)
        self.assertEqual(order, [])
        self.uut.release_read()
        w.join(TIMEOUT)
        r.join(TIMEOUT)
        self.assertEqual(order, ['writer', 'reader'])

    def test_writers_are_mutually_exclusive(self):
        inside = []
        overlaps = []

        def writer():
            for _ in range(200):
                with self.uut.write_locked():
                    inside.append(1)
                    if len(inside) > 1:
                        overlaps.append(len(inside))
                    inside.pop()

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(TIMEOUT)
        self.assertEqual(overlaps, [])

    def test_released_on_exception(self):
        with self.assertRaises(KeyError):
            with self.uut.write_locked():
                raise KeyError('x')
        self.assertFalse(self.uut.write_held)
        with self.assertRaises(KeyError):
            with self.uut.read_locked():
                raise KeyError('x')
        self.assertEqual(self.uut.readers, 0)
        with self.uut.write_locked():
            self.assertTrue(self.uut.write_held)

    def test_release_without_holding_raises(self):
        self.assertRaises(RuntimeError, self.uut.release_read)
        self.assertRaises(RuntimeError, self.uut.release_write)


if __name__ == '__main__':
    unittest.main()
