import logging

from .path_accessor import PathAccessor
from .field_paths import (
    STRUCTURAL_POLE_PATHS,
    STRUCTURAL_OWNER_PATH,
    STRUCTURAL_HEIGHT_VALUE_PATH,
    STRUCTURAL_HEIGHT_UNIT_PATH,
    STRUCTURAL_CLASS_PATH,
    STRUCTURAL_SPECIES_PATH,
    STRUCTURAL_DEFAULT_UNIT,
    STRUCTURAL_EQUIPMENTS_PATH,
    STRUCTURAL_GUYS_PATH,
    STRUCTURAL_ANALYSIS_NAME_PATH,
    STRUCTURAL_CONSTRUCTION_GRADE_PATH,
    SURVEY_ATTRIBUTES_PATH,
    SURVEY_POLE_OWNER_ATTRIBUTE,
    SURVEY_POLE_OWNER_KEYS,
    SURVEY_PLA_PATHS,
)
from .utils import Utils, NOT_AVAILABLE
from .attachment_consolidator import AttachmentConsolidator
from ..models.data_models import PoleSummary


class PoleAggregator:
    """Computes the pole-level report columns (A-K) for one matched pole"""

    def __init__(self, config=None):
        self.config = config or {}
        self.power_keywords = [keyword.upper() for keyword in self.config.get('power_company_keywords', ["CPS", "POWER"])]
        self.target_case = self.config.get('target_analysis_case', "Light - Grade C")
        self.fallback_case = self.config.get('fallback_analysis_case', "Recommended")

    def summarize(self, operation_number, matched, consolidated, survey_attachments, action,
                  measured_design=None, recommended_design=None):
        """
        Build the PoleSummary for a matched pole

        Args:
            operation_number (int): 1-based position of the pole in the report
            matched (MatchedPole): Structural location paired with its survey node
            consolidated (dict): Consolidated attachments of the pole
            survey_attachments (list): SurveyAttachment records read at the pole
            action (str): Attachment action derived from the consolidated attachments
            measured_design (dict, optional): As-measured design
            recommended_design (dict, optional): As-recommended design

        Returns:
            PoleSummary: Values for columns A-K
        """
        location = matched.structural
        if measured_design is None or recommended_design is None:
            selected = AttachmentConsolidator(self.config).select_designs(location)
            measured_design = selected[0] if measured_design is None else measured_design
            recommended_design = selected[1] if recommended_design is None else recommended_design
        pole = self.pole_structure_record(location, recommended_design, measured_design)

        pla, grade = self.pla_and_grade(location, recommended_design, matched.survey)
        lowest_com, lowest_power = self.lowest_heights(survey_attachments)

        summary = PoleSummary(
            operation_number=operation_number,
            attachment_action=action,
            pole_owner=self.pole_owner(matched.survey, pole),
            pole_number=matched.canonical_id,
            pole_structure=self.pole_structure(pole),
            proposed_riser=Utils.format_yes_no_count(self.riser_count(recommended_design)),
            proposed_guy=Utils.format_yes_no_count(len(PathAccessor.as_list(recommended_design, STRUCTURAL_GUYS_PATH))),
            pla=pla,
            construction_grade=grade,
            lowest_com=lowest_com,
            lowest_power=lowest_power,
        )
        logging.debug(f"Pole {matched.canonical_id}: {len(consolidated)} consolidated attachment(s), "
                      f"action={action}, PLA={pla}, grade={grade}")
        return summary

    @staticmethod
    def pole_structure_record(location, *designs):
        """The structure.pole record of the location, else of the first design that has one"""
        for source in (location,) + designs:
            for path in STRUCTURAL_POLE_PATHS:
                pole = PathAccessor.get(source, path)
                if isinstance(pole, dict):
                    return pole
        return {}

    @staticmethod
    def pole_owner(survey_node, pole):
        owner_attribute = PathAccessor.get(survey_node, [SURVEY_ATTRIBUTES_PATH, SURVEY_POLE_OWNER_ATTRIBUTE])
        owner = PathAccessor.first_present(owner_attribute, SURVEY_POLE_OWNER_KEYS)
        if owner is None or not str(owner).strip():
            owner = PathAccessor.get(pole, STRUCTURAL_OWNER_PATH, NOT_AVAILABLE)
        return str(owner)

    @staticmethod
    def pole_structure(pole):
        """Height, class and species, e.g. 45'-0\"-3 Southern Pine"""
        height = PathAccessor.get(pole, STRUCTURAL_HEIGHT_VALUE_PATH)
        unit = PathAccessor.get(pole, STRUCTURAL_HEIGHT_UNIT_PATH, STRUCTURAL_DEFAULT_UNIT)
        structure = Utils.to_feet_inches(height, unit)
        if structure == NOT_AVAILABLE:
            return NOT_AVAILABLE

        pole_class = PathAccessor.get(pole, STRUCTURAL_CLASS_PATH)
        species = PathAccessor.get(pole, STRUCTURAL_SPECIES_PATH)
        if pole_class not in (None, ''):
            structure += f"-{pole_class}"
        if species not in (None, ''):
            structure += f" {species}"
        return structure

    @staticmethod
    def riser_count(design):
        return sum(1 for equipment in PathAccessor.as_list(design, STRUCTURAL_EQUIPMENTS_PATH)
                   if PathAccessor.get(equipment, 'clientItem.type') == 'RISER')

    def _mentions(self, analysis, names):
        name = str(PathAccessor.get(analysis, STRUCTURAL_ANALYSIS_NAME_PATH, ''))
        analysis_id = str(PathAccessor.get(analysis, 'id', ''))
        return any(candidate and (candidate in name or candidate in analysis_id) for candidate in names)

    def target_analysis(self, location, recommended_design):
        """
        Pick the analysis case used for PLA and construction grade

        Order: the target case in the recommended design, the first recommended
        analysis, then the location's own analyses preferring the fallback or
        target case, else the last one.
        """
        analyses = [a for a in PathAccessor.as_list(recommended_design, 'analysis') if isinstance(a, dict)]
        if analyses:
            for analysis in analyses:
                if self._mentions(analysis, [self.target_case]):
                    return analysis
            return analyses[0]

        analyses = [a for a in PathAccessor.as_list(location, 'analysis') if isinstance(a, dict)]
        if analyses:
            for analysis in analyses:
                if self._mentions(analysis, [self.fallback_case, self.target_case]):
                    return analysis
            return analyses[-1]

        return None

    def pla_and_grade(self, location, recommended_design, survey_node):
        pla = NOT_AVAILABLE
        grade = NOT_AVAILABLE

        analysis = self.target_analysis(location, recommended_design)
        if analysis is not None:
            for result in PathAccessor.as_list(analysis, 'results'):
                if PathAccessor.get(result, 'component') == "Pole" and PathAccessor.get(result, 'analysisType') == "STRESS":
                    actual = PathAccessor.get(result, 'actual')
                    if isinstance(actual, (int, float)) and not isinstance(actual, bool):
                        pla = Utils.format_percentage(actual)
                    break
            grade = PathAccessor.get(analysis, STRUCTURAL_CONSTRUCTION_GRADE_PATH, NOT_AVAILABLE)

        if pla == NOT_AVAILABLE:
            survey_pla = PathAccessor.first_of(survey_node, SURVEY_PLA_PATHS)
            if survey_pla is not None:
                pla = Utils.format_percentage(survey_pla)
                logging.debug(f"PLA taken from survey final passing capacity: {survey_pla!r}")

        return pla, str(grade)

    def is_power_owner(self, owner):
        owner = str(owner or '').upper()
        return any(keyword in owner for keyword in self.power_keywords)

    def lowest_heights(self, survey_attachments):
        """
        Lowest communication and lowest electric attachment heights at the pole

        Returns:
            tuple: (lowest com, lowest power) as F'-I" strings, "NA" for an empty category
        """
        lowest_com = None
        lowest_power = None

        for attachment in survey_attachments:
            height = attachment.height_feet
            if height is None or height <= 0:
                continue
            if self.is_power_owner(attachment.owner):
                if lowest_power is None or height < lowest_power:
                    lowest_power = height
            elif lowest_com is None or height < lowest_com:
                lowest_com = height

        return (
            NOT_AVAILABLE if lowest_com is None else Utils.to_feet_inches(lowest_com, 'ft'),
            NOT_AVAILABLE if lowest_power is None else Utils.to_feet_inches(lowest_power, 'ft'),
        )
