import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from make_ready.core.survey_adapter import SurveyAttachmentSource, AttachmentMapSource, PhotofirstSource


def map_attachment(company, attachment_type, feet, inches=None, **extra):
    attributes = {
        'company_name': {'company_name': company},
        'attachment_type': {'button_added': attachment_type},
        'height_ft': {'assessment': feet},
    }
    if inches is not None:
        attributes['height_in'] = {'assessment': inches}
    record = {'attributes': attributes}
    record.update(extra)
    return record


class TestSurveyAdapter(unittest.TestCase):

    def test_source_selection(self):
        map_node = {'attachments': {'a1': map_attachment('Zayo', 'Fiber', 20)}}
        photo_node = {'photofirst_data': {'wire': {'w1': {'_measured_height': 240}}}}

        self.assertIsInstance(SurveyAttachmentSource.for_node(map_node), AttachmentMapSource)
        self.assertIsInstance(SurveyAttachmentSource.for_node(photo_node), PhotofirstSource)

        plain = SurveyAttachmentSource.for_node({'attributes': {}})
        self.assertEqual(plain.name, 'none')
        self.assertEqual(plain.read({'attributes': {}}), [])
        self.assertEqual(SurveyAttachmentSource.read_node({}), [])

    def test_attachment_map_source(self):
        node = {'attachments': {
            'a1': map_attachment('Zayo', 'Fiber', 25, 6, _trace='t1'),
            'a2': map_attachment('CPS ENERGY', 'Neutral', 20, 0),
            'a3': 'not an attachment',
        }}
        attachments = SurveyAttachmentSource.read_node(node)

        self.assertEqual(len(attachments), 2)
        first, second = attachments
        self.assertEqual(first.item_id, 'a1')
        self.assertEqual(first.owner, 'Zayo')
        self.assertEqual(first.type_token, 'Fiber')
        self.assertAlmostEqual(first.height_feet, 25.5)
        self.assertEqual(first.trace_id, 't1')
        # Zero inches still yields a height
        self.assertAlmostEqual(second.height_feet, 20.0)

    def test_attachment_map_defaults(self):
        node = {'attributes': {'attachments': {'a1': {'attributes': {}}}}}
        attachment = SurveyAttachmentSource.read_node(node)[0]
        self.assertEqual(attachment.owner, 'Unknown')
        self.assertIsNone(attachment.type_token)
        self.assertIsNone(attachment.height_feet)
        self.assertIsNone(attachment.move_inches)

    def test_photofirst_source(self):
        survey = {'traces': {'trace_data': {
            't1': {'company': 'CPS Energy', 'cable_type': 'Primary'},
            't2': {'company': 'Zayo', 'equipment_type': 'splice_box'},
        }}}
        node = {'photofirst_data': {
            'wire': {'w1': {'_trace': 't1', '_measured_height': 360, 'mr_move': 12}},
            'equipment': {'e1': {'_trace': 't2', '_measured_height': '180'}},
        }}
        attachments = SurveyAttachmentSource.read_node(node, survey)

        self.assertEqual([attachment.item_id for attachment in attachments], ['w1', 'e1'])
        wire, equipment = attachments
        self.assertEqual(wire.owner, 'CPS Energy')
        self.assertEqual(wire.type_token, 'Primary')
        self.assertAlmostEqual(wire.height_feet, 30.0)
        self.assertEqual(wire.move_inches, 12.0)
        self.assertEqual(equipment.owner, 'Zayo')
        self.assertEqual(equipment.type_token, 'splice_box')
        self.assertAlmostEqual(equipment.height_feet, 15.0)

    def test_photofirst_without_trace_data(self):
        node = {'photofirst_data': {'wire': {'w1': {'company': 'AT&T', '_measured_height': None}}}}
        attachment = SurveyAttachmentSource.read_node(node, {})[0]
        self.assertEqual(attachment.owner, 'AT&T')
        self.assertIsNone(attachment.height_feet)
        self.assertIsNone(attachment.trace_id)


if __name__ == '__main__':
    unittest.main()
