from .file_size_parser import FileSizeParser as FileSizeParser
from .time_parser import TimeParser as TimeParser
