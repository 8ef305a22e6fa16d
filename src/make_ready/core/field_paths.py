# Central precedence lists for fields that the two exports spread over several keys.
# Earlier entries win. Survey attributes carry a value per provenance key:
# user-edited values first, then imported values, then computed defaults.

# Structural (SPIDAcalc) export
STRUCTURAL_LOCATIONS_PATH = 'leads.0.locations'
STRUCTURAL_POLE_PATHS = ('structure.pole',)
STRUCTURAL_OWNER_PATH = 'owner.id'
STRUCTURAL_HEIGHT_VALUE_PATH = 'clientItem.height.value'
STRUCTURAL_HEIGHT_UNIT_PATH = 'clientItem.height.unit'
STRUCTURAL_CLASS_PATH = 'clientItem.classOfPole'
STRUCTURAL_SPECIES_PATH = 'clientItem.species'
STRUCTURAL_ATTACHMENT_HEIGHT_VALUE_PATH = 'attachmentHeight.value'
STRUCTURAL_ATTACHMENT_HEIGHT_UNIT_PATH = 'attachmentHeight.unit'
STRUCTURAL_DEFAULT_UNIT = 'METRE'
STRUCTURAL_WIRES_PATH = 'structure.wires'
STRUCTURAL_EQUIPMENTS_PATH = 'structure.equipments'
STRUCTURAL_GUYS_PATH = 'structure.guys'
STRUCTURAL_END_POINTS_PATH = 'structure.wireEndPoints'
STRUCTURAL_ANALYSIS_NAME_PATH = 'analysisCaseDetails.name'
STRUCTURAL_CONSTRUCTION_GRADE_PATH = 'analysisCaseDetails.constructionGrade'

# Survey (Katapult) export
SURVEY_ATTRIBUTES_PATH = 'attributes'
# Attribute name and its provenance keys, read with PathAccessor.first_present
SURVEY_POLE_NUMBER_ATTRIBUTE = 'PoleNumber'
SURVEY_POLE_NUMBER_KEYS = ('assessment', '-Imported')
SURVEY_POLE_TAG_ATTRIBUTE = 'pole_tag'
SURVEY_POLE_TAG_KEYS = ('tagtext',)
SURVEY_POLE_OWNER_ATTRIBUTE = 'pole_owner'
SURVEY_POLE_OWNER_KEYS = ('multi_added', 'button_added')
SURVEY_PLA_PATHS = (
    'attributes.final_passing_capacity_%.assessment',
    'attributes.final_passing_capacity_%.auto_calced',
    'attributes.final_passing_capacity_p.assessment',
)
SURVEY_WORK_TYPE_PATHS = (
    'attributes.kat_work_type.button_added',
    'attributes.kat_work_type.-Imported',
)
SURVEY_CONNECTION_TYPE_PATHS = (
    'attributes.connection_type.button_added',
    'attributes.connection_type.-Imported',
)

# Survey attachment records (top-level "attachments" map shape)
SURVEY_ATTACHMENT_MAP_PATHS = ('attachments', 'attributes.attachments')
SURVEY_ATTACHMENT_OWNER_PATHS = (
    'attributes.company_name.company_name',
    'attributes.company_name.button_added',
    'attributes.company_name.-Imported',
)
SURVEY_ATTACHMENT_TYPE_PATHS = (
    'attributes.attachment_type.button_added',
    'attributes.cable_type.button_added',
    'attributes.attachment_type.-Imported',
    'attributes.cable_type.-Imported',
)
SURVEY_ATTACHMENT_HEIGHT_FT_PATH = 'attributes.height_ft.assessment'
SURVEY_ATTACHMENT_HEIGHT_IN_PATH = 'attributes.height_in.assessment'
SURVEY_ATTACHMENT_MOVE_PATHS = ('attributes.mr_move.assessment', 'mr_move')
SURVEY_ATTACHMENT_TRACE_PATHS = ('_trace', 'attributes._trace', 'trace')

# Survey attachment records (photofirst_data shape)
SURVEY_PHOTOFIRST_GROUPS = ('wire', 'equipment')
SURVEY_TRACE_DATA_PATH = 'traces.trace_data'
