import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from make_ready.core.input_validator import InputValidator
from make_ready.core.errors import (
    InputValidationError,
    StructuralInputError,
    SurveyInputError,
    MissingFieldWarning,
)


class TestInputValidator(unittest.TestCase):

    def setUp(self):
        self.structural = {'leads': [{'locations': [
            {'label': '1-PL1', 'designs': []},
            {'label': '2-PL2', 'designs': []},
        ]}]}
        self.survey = {
            'nodes': {
                'n1': {'attributes': {'PoleNumber': {'assessment': 'PL1'}}},
                'n2': {'attributes': {}},
            },
            'connections': {},
        }

    def test_valid_inputs(self):
        structural_result, survey_result = InputValidator.validate(self.structural, self.survey)
        self.assertTrue(structural_result.is_valid)
        self.assertEqual(structural_result.usable_count, 2)
        self.assertEqual(survey_result.usable_count, 1)
        self.assertEqual(len(survey_result.warnings), 1)
        self.assertIsInstance(survey_result.warnings[0], MissingFieldWarning)
        self.assertIn('n2', str(survey_result.warnings[0]))

    def test_missing_connections_is_tolerated(self):
        del self.survey['connections']
        result = InputValidator.validate_survey(self.survey)
        self.assertTrue(result.is_valid)

    def test_structural_errors(self):
        self.assertFalse(InputValidator.validate_structural([]).is_valid)
        self.assertIn("Missing or invalid leads array in structural JSON",
                      InputValidator.validate_structural({}).errors)
        self.assertIn("Missing or invalid locations array in structural JSON",
                      InputValidator.validate_structural({'leads': []}).errors)

        result = InputValidator.validate_structural({'leads': [{'locations': [{'designs': []}, {'label': 'PL2'}]}]})
        self.assertEqual(result.errors, [
            "Location at index 0 missing required field: label",
            "Location \"PL2\" missing required field: designs array",
        ])

    def test_survey_errors(self):
        self.assertIn("Missing or invalid nodes object in survey JSON",
                      InputValidator.validate_survey({'connections': {}}).errors)
        self.assertIn("Survey JSON contains no nodes",
                      InputValidator.validate_survey({'nodes': {}}).errors)

        self.survey['connections'] = []
        self.assertIn("Invalid connections object in survey JSON",
                      InputValidator.validate_survey(self.survey).errors)

        no_poles = {'nodes': {'n1': {'attributes': {}}}}
        self.assertIn("No usable nodes with pole numbers found in survey data",
                      InputValidator.validate_survey(no_poles).errors)

    def test_structural_failure_raises(self):
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(StructuralInputError) as ctx:
                InputValidator.validate({'leads': 'x'}, self.survey)
        self.assertEqual(ctx.exception.errors, ["Missing or invalid leads array in structural JSON"])

    def test_survey_failure_raises(self):
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(SurveyInputError):
                InputValidator.validate(self.structural, {'nodes': {}})

    def test_both_failures_raise_one_aggregated_error(self):
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(InputValidationError) as ctx:
                InputValidator.validate({}, {})
        self.assertIs(type(ctx.exception), InputValidationError)
        self.assertEqual(len(ctx.exception.errors), 2)


if __name__ == '__main__':
    unittest.main()
