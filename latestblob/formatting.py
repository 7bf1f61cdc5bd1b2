from .models import Object


def human_readable_size(size_bytes):
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0 or unit == 'TB':
            break
        size /= 1024.0
    return f"{size:.1f} {unit}"


def format_object_entry(obj: Object, marker: str = ''):
    date_str = obj.last_modified.strftime('%Y-%m-%d %H:%M')
    size_str = human_readable_size(obj.size) if obj.size is not None else '-'
    line = f"{date_str} {size_str:>9} {obj.name}"
    if marker:
        line += f"  {marker}"
    return line
