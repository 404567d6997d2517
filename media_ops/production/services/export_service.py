# media_ops/production/services/export_service.py
import io

import pandas as pd

from ..status import STATUS_COLORS, JobStatus, latest_milestone, resolve_status, status_label

COLUMNS = [
    'Job ID', 'Client', 'Status', 'Status source', 'Editor',
    'Uploaded', 'Accepted', 'Ready for QC', 'Revision requested', 'Delivered', 'Last milestone',
]


def _fmt(value):
    return value.strftime('%Y-%m-%d %H:%M') if value else ''


def _report_rows(job_cards):
    rows = []
    for card in job_cards:
        resolved = resolve_status(card)
        milestone = latest_milestone(card)
        rows.append({
            'Job ID': card.job_id,
            'Client': card.client_name or '',
            'Status': status_label(resolved.status),
            'Status source': resolved.source.value,
            'Editor': card.editor_id or '',
            'Uploaded': _fmt(card.uploaded_at),
            'Accepted': _fmt(card.accepted_at),
            'Ready for QC': _fmt(card.ready_for_qc_at),
            'Revision requested': _fmt(card.revision_requested_at),
            'Delivered': _fmt(card.delivered_at),
            'Last milestone': f"{milestone[0]} {_fmt(milestone[1])}" if milestone else '',
            '_status': resolved.status,
        })
    return rows


def generate_status_report(job_cards):
    """Excel workbook with one row per job card and a per-status summary."""
    rows = _report_rows(job_cards)
    df = pd.DataFrame(rows, columns=COLUMNS + ['_status'])

    summary = pd.DataFrame({
        'Status': [status_label(s) for s in JobStatus],
        'Job cards': [sum(1 for row in rows if row['_status'] is s) for s in JobStatus],
    })

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df[COLUMNS].to_excel(writer, index=False, sheet_name='Job Status')
        summary.to_excel(writer, index=False, sheet_name='Summary')

        workbook = writer.book
        worksheet = writer.sheets['Job Status']
        worksheet.set_column(0, 0, 14)
        worksheet.set_column(1, 1, 25)
        worksheet.set_column(2, len(COLUMNS) - 1, 18)

        # Colour the status cell the same way the dashboard badges do
        formats = {
            status: workbook.add_format({'bg_color': color, 'border': 1})
            for status, color in STATUS_COLORS.items()
        }
        status_col = COLUMNS.index('Status')
        for offset, row in enumerate(rows, start=1):
            worksheet.write(offset, status_col, row['Status'], formats[row['_status']])

        writer.sheets['Summary'].set_column(0, 1, 18)

    output.seek(0)
    return output
