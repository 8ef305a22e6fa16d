import unittest
import sys
import copy
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from make_ready.core.make_ready_processor import MakeReadyProcessor
from make_ready.core.errors import StructuralInputError, SurveyInputError, UnmatchedPoleWarning, MissingFieldWarning
from make_ready.core.utils import Utils
from make_ready.models.data_models import ReportRow, COLUMN_LABELS


def single_neutral_structural():
    return {'leads': [{'locations': [{
        'label': '1-PL100',
        'designs': [{
            'label': 'Recommended Design',
            'structure': {'wires': [{
                'id': 'W1',
                'owner': {'id': 'ACME'},
                'usageGroup': 'NEUTRAL',
                'attachmentHeight': {'value': 9.144, 'unit': 'METRE'},
            }]},
        }],
    }]}]}


def single_pole_survey():
    return {'nodes': {'n1': {'attributes': {'PoleNumber': {'assessment': 'PL100'}}}}, 'connections': {}}


def two_pole_job():
    def wire(item_id, owner, usage, height):
        return {'id': item_id, 'owner': {'id': owner}, 'usageGroup': usage,
                'attachmentHeight': {'value': height, 'unit': 'METRE'}}

    first = {
        'label': '1-PL1',
        'structure': {'pole': {'owner': {'id': 'CPS'},
                               'clientItem': {'height': {'value': 45, 'unit': 'FOOT'}, 'classOfPole': '3'}}},
        'designs': [
            {'label': 'Measured Design', 'structure': {'wires': [
                wire('W1', 'CPS ENERGY', 'NEUTRAL', 8.5),
                wire('W2', 'AT&T', 'COMMUNICATION_BUNDLE', 6.0),
            ]}},
            {'label': 'Recommended Design', 'structure': {
                'wires': [
                    wire('W1', 'CPS ENERGY', 'NEUTRAL', 8.5),
                    wire('W2', 'AT&T', 'COMMUNICATION_BUNDLE', 6.3),
                    wire('W3', 'Zayo', 'COMMUNICATION_BUNDLE', 5.8),
                ],
                'wireEndPoints': [
                    {'type': 'NEXT_POLE', 'direction': 88, 'structureLabel': '2-PL2', 'wires': ['W1', 'W2', 'W3']},
                ],
            }, 'analysis': [{'id': 'Light - Grade C', 'analysisCaseDetails': {'constructionGrade': 'C'},
                             'results': [{'component': 'Pole', 'analysisType': 'STRESS', 'actual': 61.2}]}]},
        ],
    }
    second = {
        'label': '2-PL2',
        'designs': [
            {'label': 'Measured Design', 'structure': {'wires': [wire('W7', 'AT&T', 'COMMUNICATION_SERVICE', 5.0)]}},
            {'label': 'Recommended Design', 'structure': {'wires': []}},
        ],
    }
    structural = {'leads': [{'locations': [first, second]}]}

    survey = {
        'nodes': {
            'n1': {
                'attributes': {'PoleNumber': {'assessment': 'PL1'},
                               'pole_owner': {'multi_added': ['CPS ENERGY']}},
                'photofirst_data': {'wire': {
                    'w1': {'_trace': 't1', '_measured_height': 330},
                    'w2': {'_trace': 't2', '_measured_height': 240},
                }},
            },
            'n2': {'attributes': {'PoleNumber': {'assessment': 'PL2'},
                                  'kat_work_type': {'button_added': 'denied'}}},
            'n3': {'attributes': {}},
        },
        'connections': {
            'c1': {'node_id_1': 'n1', 'node_id_2': 'n2', 'sections': {'midpoint': {'photofirst_data': {'wire': {
                'm2': {'_trace': 't2', '_measured_height': 216},
            }}}}},
        },
        'traces': {'trace_data': {
            't1': {'company': 'CPS ENERGY', 'cable_type': 'Neutral'},
            't2': {'company': 'AT&T', 'cable_type': 'Telco'},
        }},
    }
    return structural, survey


class TestMakeReadyProcessor(unittest.TestCase):

    def setUp(self):
        self.processor = MakeReadyProcessor()

    def test_single_neutral_end_to_end(self):
        report = self.processor.process_data(single_neutral_structural(), single_pole_survey())

        self.assertEqual(report.header_row_count, 3)
        pole_header, attachment, from_pole, to_pole = report.data_rows()

        self.assertEqual(pole_header.role, ReportRow.POLE_HEADER)
        self.assertEqual(pole_header[0], 1)
        self.assertEqual(pole_header[1], "Installing")
        self.assertEqual(pole_header[3], "PL100")
        self.assertEqual(pole_header[11], "Primary Span")

        self.assertEqual(attachment.role, ReportRow.ATTACHMENT)
        self.assertEqual(attachment[11], "Neutral")
        self.assertEqual(attachment[12], '')
        self.assertEqual(attachment[13], Utils.to_feet_inches(9.144, 'METRE'))
        self.assertEqual(attachment[13], "30'-0\"")

        self.assertEqual(from_pole.values[11:13], ["From Pole", "PL100"])
        self.assertEqual(to_pole.values[11:13], ["To Pole", "NA"])
        self.assertEqual(report.warnings, [])

    def test_two_pole_job(self):
        structural, survey = two_pole_job()
        progress = []
        with self.assertLogs(level='INFO'):
            report = self.processor.process_data(structural, survey, lambda pct, msg: progress.append(pct))

        self.assertEqual(report.pole_count(), 2)
        self.assertEqual(progress[0], 10)
        self.assertEqual(progress[-1], 90)

        rows = report.data_rows()
        first = rows[0]
        self.assertEqual(first.values[:11], [
            1, "Installing", "CPS ENERGY", "PL1", "45'-0\"-3", "NO", "NO", "61.20%", "C", "20'-0\"", "27'-6\"",
        ])
        self.assertEqual(first[11], "Ref (East) to PL2")

        by_description = {row[11]: row for row in rows[1:4]}
        neutral = by_description["Neutral"]
        self.assertEqual(neutral[12], "27'-6\"")
        telco = by_description["AT&T Telco Com"]
        self.assertEqual(telco[12], "20'-0\"")
        self.assertEqual(telco[13], Utils.to_feet_inches(6.3, 'METRE'))
        # Mid-span: 216" measured on the span plus the recommended move
        move = (Utils.to_decimal_feet(6.3, 'METRE') - Utils.to_decimal_feet(6.0, 'METRE')) * 12
        self.assertEqual(telco[14], Utils.to_feet_inches((216 + move) / 12, 'ft'))
        zayo = by_description["Zayo Fiber Optic Com"]
        self.assertEqual(zayo[12], '')
        self.assertEqual(zayo[14], "NA")

        self.assertEqual(rows[4].values[11:13], ["From Pole", "PL1"])
        self.assertEqual(rows[5].values[11:13], ["To Pole", "PL2"])

        second = rows[6]
        self.assertEqual(second[0], 2)
        self.assertEqual(second[1], "Existing (Denied)")
        self.assertEqual(second[3], "PL2")
        self.assertEqual(rows[7][11], "No attachments on this span")
        self.assertEqual(rows[9].values[11:13], ["To Pole", "PL1"])

        self.assertEqual(len(report.merges), 14 + 11 + 11)
        self.assertEqual(len(report.warnings), 1)
        self.assertIsInstance(report.warnings[0], MissingFieldWarning)

    def test_removing_when_only_measured_attachments(self):
        structural, survey = two_pole_job()
        survey['nodes']['n2']['attributes'].pop('kat_work_type')
        report = self.processor.process_data(structural, survey)
        self.assertEqual(report.data_rows()[6][1], "Removing")

    def test_idempotent(self):
        structural, survey = two_pole_job()
        original_structural = copy.deepcopy(structural)
        original_survey = copy.deepcopy(survey)

        first = self.processor.process_data(structural, survey)
        second = MakeReadyProcessor().process_data(structural, survey)

        self.assertEqual(first.values(), second.values())
        self.assertEqual([m.as_tuple() for m in first.merges], [m.as_tuple() for m in second.merges])
        self.assertEqual(structural, original_structural)
        self.assertEqual(survey, original_survey)

    def test_unmatched_pole(self):
        survey = single_pole_survey()
        survey['nodes']['n1']['attributes']['PoleNumber']['assessment'] = 'PL999'
        with self.assertLogs(level='WARNING'):
            report = self.processor.process_data(single_neutral_structural(), survey)

        self.assertEqual(report.data_rows()[0][3], "PL100")
        self.assertEqual(report.data_rows()[0][2], "NA")
        self.assertEqual(len(report.warnings), 1)
        self.assertIsInstance(report.warnings[0], UnmatchedPoleWarning)

    def test_invalid_input_produces_no_rows(self):
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(StructuralInputError):
                self.processor.process_data({'leads': []}, single_pole_survey())
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(SurveyInputError):
                self.processor.process_data(single_neutral_structural(), {'nodes': {}})

    def test_to_dataframe(self):
        report = self.processor.process_data(single_neutral_structural(), single_pole_survey())
        df = report.to_dataframe()
        self.assertEqual(list(df.columns), ['Row Role'] + COLUMN_LABELS)
        self.assertEqual(len(df), 4)
        self.assertEqual(df.iloc[0]['Pole #'], "PL100")
        self.assertEqual(df.iloc[1]['Attacher Description'], "Neutral")


if __name__ == '__main__':
    unittest.main()
