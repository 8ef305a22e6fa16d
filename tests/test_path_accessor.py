import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from make_ready.core.path_accessor import PathAccessor


class TestPathAccessor(unittest.TestCase):

    def setUp(self):
        self.data = {
            'leads': [{'locations': [{'label': '1-PL1'}]}],
            'attributes': {
                'pole_owner': {'multi_added': ['CPS ENERGY']},
                'note': None,
                'text': 'plain',
            },
        }

    def test_get_traverses_dicts_and_lists(self):
        self.assertEqual(PathAccessor.get(self.data, 'leads.0.locations.0.label'), '1-PL1')
        self.assertEqual(PathAccessor.get(self.data, ['attributes', 'pole_owner', 'multi_added', '0']), 'CPS ENERGY')

    def test_get_returns_default_on_absence(self):
        self.assertIsNone(PathAccessor.get(self.data, 'leads.5.locations'))
        self.assertEqual(PathAccessor.get(self.data, 'leads.x', 'default'), 'default')
        self.assertEqual(PathAccessor.get(self.data, 'missing.path', []), [])
        self.assertEqual(PathAccessor.get(self.data, 'attributes.text.deeper', 'd'), 'd')
        self.assertEqual(PathAccessor.get(self.data, 'attributes.note', 'd'), 'd')
        self.assertEqual(PathAccessor.get(None, 'a', 'd'), 'd')
        self.assertEqual(PathAccessor.get(self.data, '', 'd'), 'd')

    def test_first_present(self):
        attribute = {'assessment': None, 'button_added': 'Denied', '-Imported': 'Make Ready'}
        self.assertEqual(PathAccessor.first_present(attribute, ['assessment', 'button_added', '-Imported']), 'Denied')

        dynamic = {'multi_added': {}, 'button_added': {'-Nabc': 'PL7'}}
        self.assertEqual(PathAccessor.first_present(dynamic, ['multi_added', 'button_added']), 'PL7')

        multi = {'multi_added': ['CPS ENERGY', 'AT&T'], 'button_added': 'Oncor'}
        self.assertEqual(PathAccessor.first_present(multi, ['multi_added', 'button_added']), 'CPS ENERGY')
        self.assertEqual(PathAccessor.first_present({'multi_added': [], 'button_added': 'Oncor'},
                                                    ['multi_added', 'button_added']), 'Oncor')

        self.assertEqual(PathAccessor.first_present({}, ['assessment'], 'NA'), 'NA')
        self.assertEqual(PathAccessor.first_present('not a dict', ['assessment'], 'NA'), 'NA')

    def test_first_of_skips_empty_values(self):
        node = {'attributes': {'a': {'x': ''}, 'b': {'x': None}, 'c': {'x': 'found'}}}
        self.assertEqual(PathAccessor.first_of(node, ['attributes.a.x', 'attributes.b.x', 'attributes.c.x']), 'found')
        self.assertEqual(PathAccessor.first_of(node, ['attributes.z.x'], 'NA'), 'NA')

    def test_as_list_and_as_dict(self):
        self.assertEqual(PathAccessor.as_list(self.data, 'leads.0.locations'), [{'label': '1-PL1'}])
        self.assertEqual(PathAccessor.as_list(self.data, 'attributes'), [])
        self.assertEqual(PathAccessor.as_dict(self.data, 'attributes.pole_owner'), {'multi_added': ['CPS ENERGY']})
        self.assertEqual(PathAccessor.as_dict(self.data, 'leads'), {})


if __name__ == '__main__':
    unittest.main()
