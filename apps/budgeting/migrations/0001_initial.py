import django.core.validators
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
            name='BudgetRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Decided At')),
                ('approval_note', models.TextField(blank=True, null=True, verbose_name='Approval Note')),
                ('title', models.CharField(max_length=120, verbose_name='Title')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Description')),
                ('amount_requested', models.PositiveBigIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Amount Requested')),
                ('status', models.CharField(choices=[('DRAFT', 'Draf'), ('SUBMITTED', 'Menunggu Persetujuan'), ('APPROVED', 'Disetujui'), ('REJECTED', 'Ditolak'), ('DISBURSED', 'Dicairkan'), ('COMPLETED', 'Selesai'), ('CANCELLED', 'Dibatalkan')], db_index=True, default='DRAFT', max_length=10, verbose_name='Status')),
                ('needed_by', models.DateField(blank=True, null=True, verbose_name='Needed By')),
                ('submitted_at', models.DateTimeField(blank=True, null=True, verbose_name='Submitted At')),
                ('disbursed_at', models.DateTimeField(blank=True, null=True, verbose_name='Disbursed At')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completed At')),
                ('approved_by', models.ForeignKey(blank=True, help_text='Approver who decided this record.', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='%(class)s_approved', to=settings.AUTH_USER_MODEL, verbose_name='Approved By')),
                ('disbursed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='disbursed_requests', to=settings.AUTH_USER_MODEL, verbose_name='Disbursed By')),
                ('submitted_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='budget_requests', to=settings.AUTH_USER_MODEL, verbose_name='Submitted By')),
            ],
            options={
                'verbose_name': 'Budget Request',
                'verbose_name_plural': 'Budget Requests',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['submitted_by', 'status'], name='budget_req_owner_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Rkab',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Decided At')),
                ('approval_note', models.TextField(blank=True, null=True, verbose_name='Approval Note')),
                ('code', models.CharField(help_text='RKAS-<year>-<sequence>, e.g. RKAS-2026-0001.', max_length=30, unique=True, verbose_name='Code')),
                ('fiscal_year', models.PositiveIntegerField(db_index=True, validators=[django.core.validators.MinValueValidator(2000), django.core.validators.MaxValueValidator(2100)], verbose_name='Fiscal Year')),
                ('status', models.CharField(choices=[('DRAFT', 'Draf'), ('SUBMITTED', 'Diajukan'), ('APPROVED', 'Disetujui'), ('REJECTED', 'Ditolak')], db_index=True, default='DRAFT', max_length=10, verbose_name='Status')),
                ('submitted_at', models.DateTimeField(blank=True, null=True, verbose_name='Submitted At')),
                ('approved_by', models.ForeignKey(blank=True, help_text='Approver who decided this record.', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='%(class)s_approved', to=settings.AUTH_USER_MODEL, verbose_name='Approved By')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='rkab_created', to=settings.AUTH_USER_MODEL, verbose_name='Created By')),
            ],
            options={
                'verbose_name': 'RKAS',
                'verbose_name_plural': 'RKAS',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='RkabItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount_allocated', models.PositiveBigIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Amount Allocated')),
                ('used_amount', models.PositiveBigIntegerField(default=0, verbose_name='Used Amount')),
                ('note', models.CharField(blank=True, max_length=200, null=True, verbose_name='Note')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('budget_request', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='rkab_item', to='budgeting.budgetrequest', verbose_name='Budget Request')),
                ('rkab', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='budgeting.rkab', verbose_name='RKAS')),
            ],
            options={
                'verbose_name': 'RKAS Item',
                'verbose_name_plural': 'RKAS Items',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='RequestProof',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file_key', models.CharField(max_length=255, verbose_name='Storage Key')),
                ('file_url', models.CharField(max_length=500, verbose_name='File URL')),
                ('file_name', models.CharField(max_length=255, verbose_name='Original File Name')),
                ('mime_type', models.CharField(max_length=100, verbose_name='MIME Type')),
                ('size', models.PositiveIntegerField(verbose_name='Size (bytes)')),
                ('uploaded_at', models.DateTimeField(auto_now_add=True, verbose_name='Uploaded At')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='proofs', to='budgeting.budgetrequest', verbose_name='Budget Request')),
                ('uploaded_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='uploaded_proofs', to=settings.AUTH_USER_MODEL, verbose_name='Uploaded By')),
            ],
            options={
                'verbose_name': 'Request Proof',
                'verbose_name_plural': 'Request Proofs',
                'ordering': ['-uploaded_at', '-id'],
            },
        ),
    ]
