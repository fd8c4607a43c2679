import unittest
import io
import os
import sys
import random
import tempfile
from contextlib import redirect_stdout, redirect_stderr
from functools import lru_cache
from itertools import combinations

from heap import MinHeap, HeapUnderflowError
from huffman import (
    ALPHABET_SIZE, HuffmanNode, HuffmanEncoder, UnsupportedSymbolError, UnassignedCodeError,
    count_frequency, build_forest, build_tree, create_encoding_table,
    compute_compression_length, fixed_width_length, encode_message, decode_bits
)
from report import display_codes, report_efficiency
import main


def optimal_cost(freqs):
    # перебор всех двоичных деревьев над заданными частотами
    @lru_cache(maxsize=None)
    def cost(group):
        if len(group) == 1:
            return 0
        first, rest = group[0], group[1:]
        best = None
        total = sum(freqs[i] for i in group)
        for size in range(len(rest)):
            for others in combinations(rest, size):
                left = (first,) + others
                right = tuple(i for i in rest if i not in others)
                candidate = cost(left) + cost(right) + total
                if best is None or candidate < best:
                    best = candidate
        return best

    return cost(tuple(range(len(freqs))))


def collect_leaves(node, depth=0):
    if node.is_leaf:
        return [(node, depth)]
    return collect_leaves(node.left, depth + 1) + collect_leaves(node.right, depth + 1)


def check_frequencies(testcase, node):
    if node.is_leaf:
        testcase.assertIsNone(node.left)
        testcase.assertIsNone(node.right)
        return
    testcase.assertIsNotNone(node.left)
    testcase.assertIsNotNone(node.right)
    testcase.assertIsNone(node.symbol)
    testcase.assertEqual(node.frequency, node.left.frequency + node.right.frequency)
    check_frequencies(testcase, node.left)
    check_frequencies(testcase, node.right)


class TestMinHeap(unittest.TestCase):
    def test_extract_in_order(self):
        heap = MinHeap()
        for value in [5, 1, 3, 2, 4]:
            heap.insert(value)

        self.assertEqual(heap.size(), 5)
        self.assertEqual([heap.remove_min() for _ in range(5)], [1, 2, 3, 4, 5])
        self.assertEqual(heap.size(), 0)

    def test_heap_invariant_random(self):
        random.seed(42)
        heap = MinHeap()
        remaining = []

        for _ in range(500):
            if remaining and random.random() < 0.4:
                value = heap.remove_min()
                self.assertTrue(all(value <= other for other in remaining))
                remaining.remove(value)
            else:
                value = random.randint(0, 50)
                heap.insert(value)
                remaining.append(value)
            self.assertEqual(len(heap), len(remaining))

    def test_peek_does_not_remove(self):
        heap = MinHeap()
        heap.insert(7)
        heap.insert(3)
        self.assertEqual(heap.peek_min(), 3)
        self.assertEqual(heap.get_min(), 3)
        self.assertEqual(heap.size(), 2)

    def test_ties_keep_insertion_order(self):
        heap = MinHeap(key=lambda item: item[0])
        heap.insert((1, 'first'))
        heap.insert((0, 'low'))
        heap.insert((1, 'second'))
        heap.insert((1, 'third'))

        self.assertEqual([heap.remove_min()[1] for _ in range(4)],
                         ['low', 'first', 'second', 'third'])

    def test_key_without_ordering(self):
        heap = MinHeap(key=lambda node: node.frequency)
        heap.insert(HuffmanNode.leaf('a', 2))
        heap.insert(HuffmanNode.leaf('b', 2))
        self.assertEqual(heap.remove_min().symbol, 'a')

    def test_underflow(self):
        heap = MinHeap()
        with self.assertRaises(HeapUnderflowError):
            heap.remove_min()
        with self.assertRaises(IndexError):
            heap.peek_min()


class TestHuffmanNode(unittest.TestCase):
    def test_leaf(self):
        node = HuffmanNode('x', 3)
        self.assertTrue(node.is_leaf)
        self.assertEqual(node.symbol, 'x')
        self.assertEqual(node.frequency, 3)
        self.assertIsNone(node.left)

    def test_null_symbol_is_leaf(self):
        node = HuffmanNode.leaf('\x00', 1)
        self.assertTrue(node.is_leaf)
        self.assertEqual(create_encoding_table(node)[0], '0')

    def test_internal_children_attached_once(self):
        node = HuffmanNode.internal(5)
        node.set_left(HuffmanNode.leaf('a', 2))
        node.set_right(HuffmanNode.leaf('b', 3))
        self.assertFalse(node.is_leaf)
        self.assertIsNone(node.symbol)

        with self.assertRaises(ValueError):
            node.set_left(HuffmanNode.leaf('c', 1))

    def test_leaf_rejects_children(self):
        with self.assertRaises(ValueError):
            HuffmanNode.leaf('a', 1).set_left(HuffmanNode.leaf('b', 1))

    def test_negative_frequency(self):
        with self.assertRaises(ValueError):
            HuffmanNode.leaf('a', -1)


class TestTreeBuilder(unittest.TestCase):
    def test_count_frequency(self):
        frequencies = count_frequency("aabbbcc")
        self.assertEqual(len(frequencies), ALPHABET_SIZE)
        self.assertEqual(frequencies[ord('a')], 2)
        self.assertEqual(frequencies[ord('b')], 3)
        self.assertEqual(frequencies[ord('c')], 2)
        self.assertEqual(sum(frequencies), 7)

    def test_count_frequency_none(self):
        self.assertEqual(count_frequency(None), [0] * ALPHABET_SIZE)

    def test_unsupported_symbol(self):
        with self.assertRaises(UnsupportedSymbolError) as ctx:
            count_frequency("abЖc")
        self.assertEqual(ctx.exception.position, 2)
        self.assertEqual(ctx.exception.symbol, 'Ж')

    def test_forest_skips_zero_frequencies(self):
        heap = build_forest(count_frequency("abca"))
        self.assertEqual(heap.size(), 3)

    def test_build_tree_empty_forest(self):
        with self.assertRaises(ValueError):
            build_tree(build_forest(count_frequency("")))

    def test_single_leaf_tree(self):
        root = build_tree(build_forest(count_frequency("aaaa")))
        self.assertTrue(root.is_leaf)
        self.assertEqual(root.frequency, 4)

    def test_two_equal_symbols(self):
        root = build_tree(build_forest(count_frequency("abab")))
        self.assertFalse(root.is_leaf)
        self.assertTrue(root.left.is_leaf)
        self.assertTrue(root.right.is_leaf)

        codes = create_encoding_table(root)
        self.assertEqual(codes[ord('a')], '0')
        self.assertEqual(codes[ord('b')], '1')

    def test_frequency_conservation(self):
        message = "The quick brown fox jumps over the lazy dog"
        root = build_tree(build_forest(count_frequency(message)))
        check_frequencies(self, root)
        self.assertEqual(root.frequency, len(message))
        self.assertEqual(sum(leaf.frequency for leaf, _ in collect_leaves(root)), len(message))


class TestCodeTable(unittest.TestCase):
    def test_example_message(self):
        message = "aabbbcc"
        codes = create_encoding_table(build_tree(build_forest(count_frequency(message))))

        self.assertEqual(codes[ord('b')], '0')
        self.assertEqual(codes[ord('a')], '10')
        self.assertEqual(codes[ord('c')], '11')
        self.assertEqual(compute_compression_length(message, codes), 11)
        self.assertEqual(fixed_width_length(message), 56)

    def test_single_symbol_code(self):
        codes = create_encoding_table(build_tree(build_forest(count_frequency("aaaa"))))
        self.assertEqual(codes[ord('a')], '0')
        self.assertEqual(sum(code is not None for code in codes), 1)
        self.assertEqual(compute_compression_length("aaaa", codes), 4)

    def test_none_root(self):
        self.assertEqual(create_encoding_table(None), [None] * ALPHABET_SIZE)

    def test_prefix_free(self):
        message = "Lorem ipsum dolor sit amet, consectetur adipiscing elit"
        codes = [c for c in create_encoding_table(build_tree(build_forest(count_frequency(message))))
                 if c is not None]

        for a in codes:
            for b in codes:
                if a is not b:
                    self.assertFalse(b.startswith(a), f"{a} is a prefix of {b}")

    def test_codes_match_leaf_depth(self):
        root = build_tree(build_forest(count_frequency("abracadabra")))
        codes = create_encoding_table(root)
        for leaf, depth in collect_leaves(root):
            code = codes[ord(leaf.symbol)]
            self.assertEqual(len(code), depth)
            self.assertEqual(decode_bits(code, root), leaf.symbol)

    def test_unassigned_code(self):
        codes = create_encoding_table(build_tree(build_forest(count_frequency("ab"))))
        with self.assertRaises(UnassignedCodeError):
            compute_compression_length("abc", codes)
        with self.assertRaises(KeyError):
            encode_message("z", codes)

    def test_optimal_against_brute_force(self):
        random.seed(7)
        for _ in range(30):
            distinct = random.randint(2, 6)
            symbols = random.sample("abcdefghij", distinct)
            freqs = [random.randint(1, 20) for _ in symbols]
            message = ''.join(s * f for s, f in zip(symbols, freqs))

            codes = create_encoding_table(build_tree(build_forest(count_frequency(message))))
            self.assertEqual(compute_compression_length(message, codes), optimal_cost(freqs))


class TestEncodeDecode(unittest.TestCase):
    def test_roundtrip(self):
        for message in ["aabbbcc", "abab", "aaaa", "a", "The quick brown fox", "\x00\x01\x00"]:
            result, bits = HuffmanEncoder.encode(message)
            self.assertEqual(len(bits), result.compressed_bits)
            self.assertEqual(HuffmanEncoder.decode(result, bits), message)

    def test_decode_rejects_bad_input(self):
        root = build_tree(build_forest(count_frequency("aabbbcc")))
        with self.assertRaises(ValueError):
            decode_bits("012", root)
        with self.assertRaises(ValueError):
            decode_bits("01", root)
        with self.assertRaises(ValueError):
            decode_bits("1", None)

    def test_decode_single_leaf_rejects_one(self):
        root = build_tree(build_forest(count_frequency("aa")))
        with self.assertRaises(ValueError):
            decode_bits("01", root)

    def test_empty_message(self):
        result, bits = HuffmanEncoder.encode("")
        self.assertIsNone(result.root)
        self.assertEqual(result.codes, [None] * ALPHABET_SIZE)
        self.assertEqual(result.compressed_bits, 0)
        self.assertEqual(result.ratio, 0.0)
        self.assertEqual(bits, "")
        self.assertEqual(HuffmanEncoder.decode(result, ""), "")

    def test_none_message(self):
        result = HuffmanEncoder.build(None)
        self.assertIsNone(result.root)
        self.assertEqual(result.baseline_bits, 0)

    def test_ratio(self):
        result = HuffmanEncoder.build("aabbbcc")
        self.assertEqual(result.compressed_bits, 11)
        self.assertEqual(result.baseline_bits, 56)
        self.assertAlmostEqual(result.ratio, 11 / 56)


class TestReport(unittest.TestCase):
    def test_display_codes(self):
        out = io.StringIO()
        display_codes(HuffmanEncoder.build("aa b"), out)
        text = out.getvalue()
        self.assertIn("Symbol", text)
        self.assertIn("' '", text)
        self.assertIn("a", text)

    def test_display_empty(self):
        out = io.StringIO()
        display_codes(HuffmanEncoder.build(""), out)
        self.assertIn("No symbols", out.getvalue())

    def test_report_efficiency(self):
        out = io.StringIO()
        report_efficiency(HuffmanEncoder.build("aabbbcc"), out)
        text = out.getvalue()
        self.assertIn("11 bits", text)
        self.assertIn("56 bits", text)
        self.assertIn("19.6%", text)


class TestCommandLine(unittest.TestCase):
    def run_main(self, argv):
        out = io.StringIO()
        err = io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            main.main(argv)
        return out.getvalue(), err.getvalue()

    def test_codes_command(self):
        out, _ = self.run_main(['codes', 'aabbbcc'])
        self.assertIn("11 bits", out)
        self.assertIn("10", out)

    def test_encode_command(self):
        out, _ = self.run_main(['encode', 'aabbbcc'])
        self.assertEqual(out.strip(), "10100001111")

    def test_demo_message(self):
        out, _ = self.run_main(['stats'])
        self.assertIn(f"{len(main.DEMO_MESSAGE) * 8} bits", out)

    def test_file_input(self):
        temp_dir = tempfile.mkdtemp()
        path = os.path.join(temp_dir, "message.txt")
        try:
            with open(path, 'w', encoding='latin-1') as f:
                f.write("abab")
            out, _ = self.run_main(['stats', '-f', path])
            self.assertIn("4 bits", out)
        finally:
            import shutil
            shutil.rmtree(temp_dir)

    def test_unsupported_symbol_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(['codes', 'aЖ'])
        self.assertEqual(ctx.exception.code, 1)

    def test_no_command_prints_help(self):
        out, _ = self.run_main([])
        self.assertIn("usage", out)


def run_tests():
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestMinHeap))
    suite.addTests(loader.loadTestsFromTestCase(TestHuffmanNode))
    suite.addTests(loader.loadTestsFromTestCase(TestTreeBuilder))
    suite.addTests(loader.loadTestsFromTestCase(TestCodeTable))
    suite.addTests(loader.loadTestsFromTestCase(TestEncodeDecode))
    suite.addTests(loader.loadTestsFromTestCase(TestReport))
    suite.addTests(loader.loadTestsFromTestCase(TestCommandLine))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
