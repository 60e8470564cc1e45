#!/usr/bin/env python3
"""
Unit tests for the point size store, cache keys, clamping and the
ImageMagick caption measurer.

These tests never call ImageMagick; subprocess.run is patched where the
measurer is exercised.

Run with:
    python3 -m pytest kometa_images/test_pointsize_cache.py -v
"""

import subprocess
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from kometa_images.errors import (
    MeasurementError,
    PointSizeResolveError,
    StoreUnavailableError,
)
from kometa_images.measure import (
    MagickMeasurer,
    build_measure_command,
    escape_caption_text,
    parse_point_size,
)
from kometa_images.pointsize_cache import (
    PointSizeCache,
    build_cache_key,
    clamp_point_size,
)
from kometa_images.store import PointSizeStore


class FakeMeasurer:
    """Returns canned sizes per text and records every call."""

    def __init__(self, sizes=None, default=150, fail_for=()):
        self.sizes = sizes or {}
        self.default = default
        self.fail_for = set(fail_for)
        self.calls = []

    def measure(self, text, font, box_width, box_height):
        self.calls.append((text, font, box_width, box_height))
        if text in self.fail_for:
            raise MeasurementError("unable to read font", ['magick'], 'no such font')
        return self.sizes.get(text, self.default)


class StoreTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.db_path = self.tmp / 'cache' / 'pointsize_cache.db'

    def tearDown(self):
        self._tmp.cleanup()


class TestPointSizeStore(StoreTestCase):
    """Tests for PointSizeStore"""

    def test_round_trip(self):
        """put followed by get returns the exact value"""
        store = PointSizeStore(self.db_path)
        store.ensure_table()
        store.put('some key', 187)
        self.assertEqual(store.get('some key'), 187)

    def test_unknown_key_is_none(self):
        """A missing key is reported as None, not an error"""
        store = PointSizeStore(self.db_path)
        store.ensure_table()
        self.assertIsNone(store.get('never written'))

    def test_put_replaces_existing_key(self):
        """put is an upsert"""
        store = PointSizeStore(self.db_path)
        store.ensure_table()
        store.put('k', 100)
        store.put('k', 120)
        self.assertEqual(store.get('k'), 120)
        self.assertEqual(store.count(), 1)

    def test_ensure_table_is_idempotent(self):
        """Creating the table twice keeps existing rows"""
        store = PointSizeStore(self.db_path)
        store.ensure_table()
        store.put('k', 100)
        store.ensure_table()
        self.assertEqual(store.get('k'), 100)

    def test_cold_store_creates_file_and_parents(self):
        """The database file and its directory are created on first use"""
        self.assertFalse(self.db_path.exists())
        PointSizeStore(self.db_path).ensure_table()
        self.assertTrue(self.db_path.exists())

    def test_values_visible_to_new_instance(self):
        """Entries persist across store instances (i.e. across runs)"""
        first = PointSizeStore(self.db_path)
        first.ensure_table()
        first.put('k', 222)
        self.assertEqual(PointSizeStore(self.db_path).get('k'), 222)

    def test_clear_removes_entries(self):
        store = PointSizeStore(self.db_path)
        store.ensure_table()
        store.put('a', 1)
        store.put('b', 2)
        self.assertEqual(store.clear(), 2)
        self.assertEqual(store.count(), 0)
        self.assertIsNone(store.get('a'))

    def test_unavailable_path_raises(self):
        """A path that cannot hold a database raises StoreUnavailableError"""
        blocker = self.tmp / 'not_a_dir'
        blocker.write_text('plain file')
        store = PointSizeStore(blocker / 'pointsize_cache.db')
        with self.assertRaises(StoreUnavailableError) as ctx:
            store.ensure_table()
        self.assertEqual(ctx.exception.db_path, blocker / 'pointsize_cache.db')

    def test_concurrent_table_creation_and_writes(self):
        """Racing ensure_table/put calls neither fail nor corrupt the table"""
        errors = []

        def worker(n):
            try:
                store = PointSizeStore(self.db_path)
                store.ensure_table()
                store.put('shared', n)
                store.put(f'own-{n}', n)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        store = PointSizeStore(self.db_path)
        self.assertIn(store.get('shared'), set(range(8)))
        self.assertEqual(store.count(), 9)


class TestBuildCacheKey(unittest.TestCase):
    """Tests for build_cache_key"""

    BASE = ('ENGLISH', 'Comfortaa-Medium', 1800, 1000, 100, 250)

    def test_deterministic(self):
        self.assertEqual(build_cache_key(*self.BASE), build_cache_key(*self.BASE))

    def test_each_field_changes_key(self):
        """Changing any single field gives a different key"""
        variants = [
            ('ENGLISH ', 'Comfortaa-Medium', 1800, 1000, 100, 250),
            ('ENGLISH', 'Comfortaa-Bold', 1800, 1000, 100, 250),
            ('ENGLISH', 'Comfortaa-Medium', 1801, 1000, 100, 250),
            ('ENGLISH', 'Comfortaa-Medium', 1800, 999, 100, 250),
            ('ENGLISH', 'Comfortaa-Medium', 1800, 1000, 101, 250),
            ('ENGLISH', 'Comfortaa-Medium', 1800, 1000, 100, 251),
        ]
        keys = {build_cache_key(*self.BASE)}
        keys.update(build_cache_key(*v) for v in variants)
        self.assertEqual(len(keys), len(variants) + 1)

    def test_delimiter_in_values_does_not_collide(self):
        """Text/font containing dashes cannot shift into each other"""
        a = build_cache_key('SCI-FI', 'Comfortaa', 1800, 1000, 100, 250)
        b = build_cache_key('SCI', 'FI-Comfortaa', 1800, 1000, 100, 250)
        self.assertNotEqual(a, b)

    def test_quotes_and_commas_do_not_collide(self):
        a = build_cache_key('A","B', 'C', 1, 1, 1, 1)
        b = build_cache_key('A', 'B","C', 1, 1, 1, 1)
        self.assertNotEqual(a, b)

    def test_numeric_strings_normalised(self):
        """'1800' and 1800 describe the same box"""
        self.assertEqual(
            build_cache_key('X', 'F', '1800', '1000', '100', '250'),
            build_cache_key('X', 'F', 1800, 1000, 100, 250),
        )

    def test_bool_rejected(self):
        with self.assertRaises(TypeError):
            build_cache_key('X', 'F', True, 1000, 100, 250)

    def test_unicode_text(self):
        self.assertNotEqual(
            build_cache_key('日本語', 'F', 1, 1, 1, 1),
            build_cache_key('日本', 'F', 1, 1, 1, 1),
        )


class TestClampPointSize(unittest.TestCase):
    """Tests for clamp_point_size"""

    def test_matches_min_max_formula(self):
        for raw in range(1, 400, 7):
            self.assertEqual(clamp_point_size(raw, 100, 250), max(100, min(250, raw)))

    def test_bounds_are_inclusive(self):
        self.assertEqual(clamp_point_size(100, 100, 250), 100)
        self.assertEqual(clamp_point_size(250, 100, 250), 250)

    def test_equal_bounds(self):
        self.assertEqual(clamp_point_size(5, 80, 80), 80)

    def test_inverted_range_rejected(self):
        with self.assertRaises(ValueError):
            clamp_point_size(120, 250, 100)


class TestPointSizeCache(StoreTestCase):
    """Tests for PointSizeCache.resolve"""

    def make_cache(self, measurer):
        return PointSizeCache(PointSizeStore(self.db_path), measurer)

    def test_miss_then_hit_clamps_to_max(self):
        """Raw 312 with max 250 is stored and returned as 250; second call is a hit"""
        measurer = FakeMeasurer({'ENGLISH': 312})
        cache = self.make_cache(measurer)

        first = cache.resolve('ENGLISH', 'ComfortAa-Medium', 1800, 1000, 100, 250)
        second = cache.resolve('ENGLISH', 'ComfortAa-Medium', 1800, 1000, 100, 250)

        self.assertEqual(first, 250)
        self.assertEqual(second, 250)
        self.assertEqual(measurer.calls, [('ENGLISH', 'ComfortAa-Medium', 1800, 1000)])
        self.assertEqual((cache.hits, cache.misses), (1, 1))

        key = build_cache_key('ENGLISH', 'ComfortAa-Medium', 1800, 1000, 100, 250)
        self.assertEqual(PointSizeStore(self.db_path).get(key), 250)

    def test_truncation_is_clamped_and_logged(self):
        """Raw 42 with min 100 is stored and returned as 100 with a warning"""
        measurer = FakeMeasurer({'A VERY LONG AWARD NAME': 42})
        cache = self.make_cache(measurer)

        with self.assertLogs('KometaImages', level='WARNING') as logs:
            size = cache.resolve('A VERY LONG AWARD NAME', 'Comfortaa-Medium', 1800, 1000, 100, 250)

        self.assertEqual(size, 100)
        self.assertTrue(any('POINTSIZE_TRUNCATED' in line for line in logs.output))
        key = build_cache_key('A VERY LONG AWARD NAME', 'Comfortaa-Medium', 1800, 1000, 100, 250)
        self.assertEqual(cache.store.get(key), 100)

    def test_in_range_value_unchanged(self):
        cache = self.make_cache(FakeMeasurer({'DRAMA': 180}))
        self.assertEqual(cache.resolve('DRAMA', 'F', 1800, 1000, 100, 250), 180)

    def test_persistent_across_cache_instances(self):
        """A later run reuses sizes measured by an earlier one"""
        self.make_cache(FakeMeasurer({'HBO': 200})).resolve('HBO', 'F', 1800, 1000, 100, 250)

        measurer = FakeMeasurer({'HBO': 999})
        size = self.make_cache(measurer).resolve('HBO', 'F', 1800, 1000, 100, 250)

        self.assertEqual(size, 200)
        self.assertEqual(measurer.calls, [])

    def test_different_range_is_a_separate_entry(self):
        measurer = FakeMeasurer({'X': 312})
        cache = self.make_cache(measurer)
        self.assertEqual(cache.resolve('X', 'F', 1800, 1000, 100, 250), 250)
        self.assertEqual(cache.resolve('X', 'F', 1800, 1000, 100, 300), 300)
        self.assertEqual(len(measurer.calls), 2)

    def test_measurement_failure_is_not_cached(self):
        """A failed measurement raises and leaves no entry behind"""
        failing = FakeMeasurer(fail_for={'ENGLISH'})
        cache = self.make_cache(failing)

        with self.assertRaises(PointSizeResolveError) as ctx:
            cache.resolve('ENGLISH', 'Missing-Font', 1800, 1000, 100, 250)

        self.assertEqual(ctx.exception.text, 'ENGLISH')
        self.assertEqual(ctx.exception.font, 'Missing-Font')
        self.assertIn('1800x1000', str(ctx.exception))
        self.assertEqual(cache.store.count(), 0)

        working = FakeMeasurer({'ENGLISH': 160})
        size = self.make_cache(working).resolve('ENGLISH', 'Missing-Font', 1800, 1000, 100, 250)
        self.assertEqual(size, 160)
        self.assertEqual(len(working.calls), 1)

    def test_invalid_range_rejected_before_measuring(self):
        measurer = FakeMeasurer()
        cache = self.make_cache(measurer)
        with self.assertRaises(ValueError):
            cache.resolve('X', 'F', 1800, 1000, 250, 100)
        with self.assertRaises(ValueError):
            cache.resolve('X', 'F', 1800, 1000, 0, 100)
        self.assertEqual(measurer.calls, [])

    def test_store_failure_propagates(self):
        """A broken store stops the caller instead of silently measuring"""
        store = mock.Mock()
        store.get.side_effect = StoreUnavailableError(self.db_path, 'disk I/O error')
        measurer = FakeMeasurer()
        cache = PointSizeCache(store, measurer)

        with self.assertRaises(StoreUnavailableError):
            cache.resolve('X', 'F', 1800, 1000, 100, 250)
        self.assertEqual(measurer.calls, [])

    def test_one_write_per_miss_and_none_per_hit(self):
        store = mock.Mock(wraps=PointSizeStore(self.db_path))
        cache = PointSizeCache(store, FakeMeasurer())

        cache.resolve('X', 'F', 1800, 1000, 100, 250)
        cache.resolve('X', 'F', 1800, 1000, 100, 250)

        self.assertEqual(store.put.call_count, 1)
        self.assertEqual(store.get.call_count, 2)

    def test_cold_store_first_call_is_a_miss(self):
        self.assertFalse(self.db_path.exists())
        measurer = FakeMeasurer({'ENGLISH': 130})
        size = self.make_cache(measurer).resolve('ENGLISH', 'F', 1800, 1000, 100, 250)
        self.assertEqual(size, 130)
        self.assertTrue(self.db_path.exists())
        self.assertEqual(len(measurer.calls), 1)


def _completed(stdout='', stderr='', returncode=0):
    return subprocess.CompletedProcess(args=['magick'], returncode=returncode,
                                       stdout=stdout, stderr=stderr)


class TestMagickMeasurer(unittest.TestCase):
    """Tests for the ImageMagick caption measurer"""

    def test_command_layout(self):
        cmd = build_measure_command('ENGLISH', 'fonts/Comfortaa-Medium.ttf', 1800, 1000, 'magick')
        self.assertEqual(cmd, [
            'magick',
            '-size', '1800x1000',
            '-font', 'fonts/Comfortaa-Medium.ttf',
            'caption:ENGLISH',
            '-format', '%[caption:pointsize]',
            'info:',
        ])

    def test_escapes_file_include_and_backslash(self):
        self.assertEqual(escape_caption_text('@home'), '\\@home')
        self.assertEqual(escape_caption_text('A\\B'), 'A\\\\B')
        self.assertEqual(escape_caption_text('user@host'), 'user@host')

    def test_escapes_percent(self):
        """Percent escapes such as %w stay literal text"""
        self.assertEqual(escape_caption_text('100% PURE'), '100%% PURE')
        self.assertIn('caption:50%% OFF', build_measure_command('50% OFF', 'F', 10, 10))

    def test_parse_point_size(self):
        self.assertEqual(parse_point_size('312\n'), 312)
        self.assertEqual(parse_point_size('87.9'), 87)
        for bad in ('', 'abc', '0', '-5', 'nan'):
            with self.assertRaises(ValueError):
                parse_point_size(bad)

    @mock.patch('kometa_images.measure.subprocess.run')
    def test_measure_returns_size(self, run):
        run.return_value = _completed(stdout='312\n')
        measurer = MagickMeasurer('magick', timeout=5)

        self.assertEqual(measurer.measure('ENGLISH', 'Comfortaa-Medium', 1800, 1000), 312)
        self.assertEqual(run.call_count, 1)
        self.assertEqual(run.call_args.kwargs['timeout'], 5)

    @mock.patch('kometa_images.measure.subprocess.run')
    def test_nonzero_exit_raises(self, run):
        run.return_value = _completed(stderr='unable to read font', returncode=1)
        with self.assertRaises(MeasurementError) as ctx:
            MagickMeasurer().measure('X', 'Nope', 10, 10)
        self.assertIn('unable to read font', str(ctx.exception))

    @mock.patch('kometa_images.measure.subprocess.run')
    def test_non_numeric_output_raises(self, run):
        run.return_value = _completed(stdout='warning: something\n')
        with self.assertRaises(MeasurementError):
            MagickMeasurer().measure('X', 'F', 10, 10)

    @mock.patch('kometa_images.measure.subprocess.run')
    def test_timeout_raises(self, run):
        run.side_effect = subprocess.TimeoutExpired(cmd='magick', timeout=1)
        with self.assertRaises(MeasurementError) as ctx:
            MagickMeasurer(timeout=1).measure('X', 'F', 10, 10)
        self.assertIn('timed out', str(ctx.exception))

    @mock.patch('kometa_images.measure.subprocess.run')
    def test_missing_binary_raises(self, run):
        run.side_effect = FileNotFoundError('magick')
        with self.assertRaises(MeasurementError):
            MagickMeasurer('magick').measure('X', 'F', 10, 10)


if __name__ == '__main__':
    unittest.main()
