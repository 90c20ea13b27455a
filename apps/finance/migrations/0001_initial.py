import django.core.validators
import django.db.models.deletion
import django.db.models.functions.text
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('budgeting', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FundingSource',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=80, verbose_name='Name')),
                ('agency', models.CharField(blank=True, help_text='Issuing agency, if any.', max_length=80, null=True, verbose_name='Agency')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
            ],
            options={
                'verbose_name': 'Funding Source',
                'verbose_name_plural': 'Funding Sources',
                'ordering': ['name'],
                'constraints': [models.UniqueConstraint(django.db.models.functions.text.Lower('name'), name='uniq_funding_source_name_ci')],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entry_type', models.CharField(choices=[('INCOME', 'Pemasukan'), ('EXPENSE', 'Pengeluaran')], max_length=10, verbose_name='Type')),
                ('amount', models.PositiveBigIntegerField(help_text='Whole rupiah, always positive.', validators=[django.core.validators.MinValueValidator(1)], verbose_name='Amount')),
                ('date', models.DateField(verbose_name='Date')),
                ('description', models.CharField(blank=True, max_length=200, null=True, verbose_name='Description')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('budget_request', models.ForeignKey(blank=True, help_text='Request whose disbursement produced this entry.', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='budgeting.budgetrequest', verbose_name='Budget Request')),
                ('funding_source', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='finance.fundingsource', verbose_name='Funding Source')),
                ('recorded_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to=settings.AUTH_USER_MODEL, verbose_name='Recorded By')),
                ('rkab_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='budgeting.rkabitem', verbose_name='RKAS Item')),
            ],
            options={
                'verbose_name': 'Ledger Entry',
                'verbose_name_plural': 'Ledger Entries',
                'ordering': ['-date', '-id'],
                'indexes': [models.Index(fields=['entry_type', 'date'], name='ledger_type_date_idx'), models.Index(fields=['date'], name='ledger_date_idx')],
            },
        ),
    ]
