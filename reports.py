import io
from datetime import datetime

from reportlab.lib.pagesizes import letter
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet


def create_stats_pdf(stats, generated_at=None):
    """Create a PDF bytes buffer from the dashboard statistics dict (ReportLab)."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    styles = getSampleStyleSheet()
    elements = []

    generated_at = generated_at or datetime.now()
    elements.append(Paragraph("Resumen de Tareas", styles['Title']))
    elements.append(Paragraph(f"Generado el {generated_at.strftime('%Y-%m-%d %H:%M')}", styles['Normal']))
    elements.append(Spacer(1, 12))

    # Global counts
    summary = [
        ["Pendientes", "En progreso", "Completadas", "Total", "Progreso"],
        [
            stats.get('pending', 0),
            stats.get('in_progress', 0),
            stats.get('completed', 0),
            stats.get('total', 0),
            f"{stats.get('completion_percentage', 0)}%",
        ],
    ]
    summary_table = Table(summary, colWidths=[100, 100, 100, 80, 80])
    summary_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2c3e50')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('BOX', (0, 0), (-1, -1), 0.25, colors.gray),
        ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.gray),
    ]))
    elements.append(summary_table)
    elements.append(Spacer(1, 18))

    user_stats = stats.get('user_stats') or []
    if user_stats:
        elements.append(Paragraph("Tareas completadas por usuario", styles['Heading2']))
        elements.append(Spacer(1, 6))

        data = [["Usuario", "Rol", "Completadas", "Asignadas", "Progreso"]]
        for s in user_stats:
            data.append([s['name'], s['role'], s['completed'], s['total'], f"{s['percentage']}%"])

        table = Table(data, colWidths=[170, 80, 80, 80, 80])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2c3e50')),  # header background
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (2, 1), (-1, -1), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.gray),
            ('BOX', (0, 0), (-1, -1), 0.25, colors.gray),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f7fafc')]),
        ]))
        elements.append(table)

    doc.build(elements)
    buffer.seek(0)
    return buffer.getvalue()
