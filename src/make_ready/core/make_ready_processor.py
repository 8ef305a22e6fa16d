import logging

from .path_accessor import PathAccessor
from .field_paths import STRUCTURAL_END_POINTS_PATH
from .input_validator import InputValidator
from .pole_matcher import PoleMatcher
from .survey_adapter import SurveyAttachmentSource
from .connection_processor import ConnectionProcessor
from .attachment_consolidator import AttachmentConsolidator, MidSpanResolver
from .pole_aggregator import PoleAggregator
from .report_builder import ReportBuilder, HEADER_ROW_COUNT
from ..models.data_models import Report


class MakeReadyProcessor:
    """Reconciles the structural and survey exports into a make-ready report"""

    def __init__(self, config=None):
        self.config = config or {}
        self.consolidator = AttachmentConsolidator(self.config)
        self.aggregator = PoleAggregator(self.config)

    def process_data(self, structural, survey, progress_callback=None):
        """
        Build the report for every structural pole, in structural order

        Args:
            structural (dict): Parsed structural (SPIDAcalc) export
            survey (dict): Parsed survey (Katapult) export
            progress_callback (callable, optional): Called as progress_callback(percentage, message)

        Raises:
            InputValidationError: Either document fails validation; no rows are produced

        Returns:
            Report: Header and pole rows, merged regions and non-fatal warnings
        """
        if progress_callback:
            progress_callback(10, "Validating input files...")

        _, survey_result = InputValidator.validate(structural, survey)
        warnings = list(survey_result.warnings)

        if progress_callback:
            progress_callback(30, "Matching poles...")

        matcher = PoleMatcher(self.config)
        matched_poles = matcher.match(structural, survey)
        warnings.extend(matcher.warnings)

        connection_processor = ConnectionProcessor(survey)
        builder = ReportBuilder(connection_processor, MidSpanResolver(connection_processor))

        rows = builder.header_rows()
        merges = builder.header_merges()

        if progress_callback:
            progress_callback(50, f"Processing {len(matched_poles)} poles...")

        for operation_number, matched in enumerate(matched_poles, start=1):
            logging.info(f"Processing pole {operation_number}/{len(matched_poles)}: {matched.canonical_id}")

            measured_design, recommended_design = self.consolidator.select_designs(matched.structural)
            survey_attachments = SurveyAttachmentSource.read_node(matched.survey, survey)

            consolidated = self.consolidator.consolidate(measured_design, recommended_design, survey_attachments)
            action = self.consolidator.derive_action(consolidated, matched.survey)

            summary = self.aggregator.summarize(operation_number, matched, consolidated, survey_attachments, action,
                                                measured_design, recommended_design)

            end_points = PathAccessor.as_list(recommended_design, STRUCTURAL_END_POINTS_PATH)
            block_rows, block_merges = builder.build_pole_block(len(rows), summary, consolidated, matched, end_points)
            rows.extend(block_rows)
            merges.extend(block_merges)

        if progress_callback:
            progress_callback(90, "Report rows built")

        report = Report(rows, merges, warnings, HEADER_ROW_COUNT)
        logging.info(f"Built report: {report.pole_count()} poles, {len(rows)} rows, "
                     f"{len(merges)} merged regions, {len(warnings)} warnings")
        return report
