from datavalidator.source.models import TabularDataFile


def split(tabular_data_file: TabularDataFile, max_lines_per_chunk: int) -> list[TabularDataFile]:
    """Partition a tabular part into line-bounded chunks.

    Chunks point at the parent's file; chunk ``i`` covers the data lines
    following source line ``parent.line_offset + i * max_lines_per_chunk``.
    A part that fits in one chunk is returned unchanged.

    Raises:
        ValueError: if ``max_lines_per_chunk`` is not positive.
    """
    if max_lines_per_chunk <= 0:
        raise ValueError(f"max_lines_per_chunk must be positive, got {max_lines_per_chunk}")
    if tabular_data_file.data_line_count <= max_lines_per_chunk:
        return [tabular_data_file]

    chunks: list[TabularDataFile] = []
    remaining = tabular_data_file.data_line_count
    line_offset = tabular_data_file.line_offset
    while remaining > 0:
        size = min(max_lines_per_chunk, remaining)
        chunks.append(tabular_data_file.with_lines(line_offset, size))
        line_offset += size
        remaining -= size
    return chunks
