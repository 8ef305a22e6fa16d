import logging

from .path_accessor import PathAccessor
from .pole_matcher import PoleMatcher
from .errors import (
    InputValidationError,
    StructuralInputError,
    SurveyInputError,
    MissingFieldWarning,
)


class ValidationResult:
    def __init__(self, errors=None, warnings=None, usable_count=0):
        self.errors = errors or []
        self.warnings = warnings or []
        self.usable_count = usable_count

    @property
    def is_valid(self):
        return not self.errors


class InputValidator:
    """Checks both exports up front so that schema problems abort before any row exists"""

    @staticmethod
    def validate_structural(data):
        """
        Validate the structural export: leads[0].locations with a label and designs per location

        Returns:
            ValidationResult: errors plus the number of locations found
        """
        errors = []

        if not isinstance(data, dict):
            errors.append("Invalid structural JSON format: root must be an object")
            return ValidationResult(errors)

        if not isinstance(data.get('leads'), list):
            errors.append("Missing or invalid leads array in structural JSON")
            return ValidationResult(errors)

        locations = PathAccessor.get(data, 'leads.0.locations')
        if not isinstance(locations, list):
            errors.append("Missing or invalid locations array in structural JSON")
            return ValidationResult(errors)

        for idx, location in enumerate(locations):
            if not isinstance(location, dict):
                errors.append(f"Location at index {idx} is not an object")
                continue
            label = location.get('label')
            if not label:
                errors.append(f"Location at index {idx} missing required field: label")
            if not isinstance(location.get('designs'), list):
                errors.append(f"Location \"{label or idx}\" missing required field: designs array")

        return ValidationResult(errors, usable_count=len(locations))

    @staticmethod
    def validate_survey(data):
        """
        Validate the survey export and count nodes that carry a pole number.

        Nodes without a pole number produce a MissingFieldWarning and are
        excluded from matching; they are not fatal on their own.
        """
        errors = []
        warnings = []

        if not isinstance(data, dict):
            errors.append("Invalid survey JSON format: root must be an object")
            return ValidationResult(errors)

        nodes = data.get('nodes')
        if not isinstance(nodes, dict):
            errors.append("Missing or invalid nodes object in survey JSON")
            return ValidationResult(errors)
        if not nodes:
            errors.append("Survey JSON contains no nodes")
            return ValidationResult(errors)

        connections = data.get('connections')
        if connections is not None and not isinstance(connections, dict):
            errors.append("Invalid connections object in survey JSON")

        usable = 0
        for node_id, node in nodes.items():
            if PoleMatcher.pole_number_for(node) is not None:
                usable += 1
            else:
                warnings.append(MissingFieldWarning(f"Node {node_id} has no PoleNumber (will be skipped during processing)"))

        if usable == 0:
            errors.append("No usable nodes with pole numbers found in survey data")

        return ValidationResult(errors, warnings, usable)

    @staticmethod
    def validate(structural, survey):
        """
        Validate both documents and raise one aggregated error if either fails

        Raises:
            StructuralInputError: Only the structural document is invalid
            SurveyInputError: Only the survey document is invalid
            InputValidationError: Both documents are invalid

        Returns:
            tuple: (structural ValidationResult, survey ValidationResult)
        """
        structural_result = InputValidator.validate_structural(structural)
        survey_result = InputValidator.validate_survey(survey)

        for error in structural_result.errors + survey_result.errors:
            logging.error(error)

        if structural_result.errors and survey_result.errors:
            raise InputValidationError(structural_result.errors + survey_result.errors)
        if structural_result.errors:
            raise StructuralInputError(structural_result.errors)
        if survey_result.errors:
            raise SurveyInputError(survey_result.errors)

        if survey_result.warnings:
            shown = survey_result.warnings[:5]
            for warning in shown:
                logging.warning(str(warning))
            if len(survey_result.warnings) > len(shown):
                logging.warning(f"...and {len(survey_result.warnings) - len(shown)} more nodes without pole numbers")

        logging.info(f"Structural JSON: {structural_result.usable_count} poles; "
                     f"survey JSON: {survey_result.usable_count} usable nodes with pole numbers")
        return structural_result, survey_result
