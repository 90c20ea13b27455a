import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FinancialReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('report_type', models.CharField(choices=[('INCOME', 'Penerimaan'), ('EXPENSE', 'Pengeluaran'), ('BALANCE', 'Neraca')], max_length=10, verbose_name='Report Type')),
                ('period', models.CharField(help_text='Calendar month, YYYY-MM.', max_length=7, verbose_name='Period')),
                ('title', models.CharField(max_length=200, verbose_name='Title')),
                ('summary', models.JSONField(default=list, verbose_name='Summary')),
                ('file_name', models.CharField(max_length=100, verbose_name='File Name')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='financial_reports', to=settings.AUTH_USER_MODEL, verbose_name='Generated By')),
            ],
            options={
                'verbose_name': 'Financial Report',
                'verbose_name_plural': 'Financial Reports',
                'ordering': ['-period', 'report_type'],
                'constraints': [models.UniqueConstraint(fields=('report_type', 'period'), name='uniq_report_type_period')],
            },
        ),
    ]
