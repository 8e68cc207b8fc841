"""
Centralized constants for the Markdown to DOCX converter.
All layout magic numbers live here (WordprocessingML units).
"""

# ===========================================
# UNITS
# ===========================================
TWIPS_PER_INCH = 1440                 # 1 twip = 1/20 pt
HALF_POINTS_PER_POINT = 2             # w:sz is expressed in half-points

# ===========================================
# FONTS & COLORS
# ===========================================
MONOSPACE_FONT = 'Consolas'
CODE_FONT_SIZE_HALF_POINTS = 20       # 10pt
HYPERLINK_COLOR = '0563C1'
HYPERLINK_STYLE = 'Hyperlink'
IMAGE_PLACEHOLDER_COLOR = '888888'
SHADING_FILL = 'F4F4F4'               # code lines and table header cells
BLOCKQUOTE_BORDER_COLOR = 'BBBBBB'
RULE_BORDER_COLOR = 'CCCCCC'

# ===========================================
# SPACING (twips)
# ===========================================
HEADING_SPACING_BEFORE = 240
HEADING_SPACING_AFTER = 120
PARAGRAPH_SPACING_AFTER = 160
LIST_ITEM_SPACING_AFTER = 80
CODE_LINE_SPACING_AFTER = 0
BLOCK_SPACER_SPACING_AFTER = 160      # spacer after code blocks and tables
RULE_SPACING = 240

# ===========================================
# INDENTS & BORDERS
# ===========================================
BLOCKQUOTE_INDENT = TWIPS_PER_INCH // 2  # 720
BLOCKQUOTE_BORDER_SIZE = 6            # eighths of a point
BLOCKQUOTE_BORDER_SPACE = 10
RULE_BORDER_SIZE = 6
RULE_BORDER_SPACE = 1
TAB_STOP_POSITION_MAX = 9026          # right edge of an A4 text column

# ===========================================
# LISTS
# ===========================================
NUMBERING_LEVEL_COUNT = 9
LIST_INDENT_STEP = TWIPS_PER_INCH // 2   # per level
LIST_HANGING_INDENT = TWIPS_PER_INCH // 4
BULLET_REFERENCE = 'bullet-list'
ORDERED_REFERENCE = 'ordered-list'
BULLET_GLYPHS = ('•', '◦', '–')
ORDERED_FORMATS = ('decimal', 'lowerLetter', 'lowerRoman')
ORDERED_SUFFIXES = ('.', ')', '.')
CHECKED_PREFIX = '☑ '
UNCHECKED_PREFIX = '☐ '

# ===========================================
# TABLES
# ===========================================
TABLE_WIDTH_PERCENT = 100

# ===========================================
# API / SERVER
# ===========================================
API_RATE_LIMIT = '60/minute'
MAX_MARKDOWN_SIZE_KB = 2048
MIN_FONT_SIZE_PT = 8
MAX_FONT_SIZE_PT = 20
DOCX_MEDIA_TYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
DEFAULT_DOWNLOAD_NAME = 'converted.docx'
MARKDOWN_EXTENSIONS = ['.md', '.markdown']

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/md2docx.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
