"""CDK Stack for the Instance Lifecycle Cleanup Lambda."""

from aws_cdk import (
    Stack,
    Duration,
    aws_lambda as lambda_,
    aws_iam as iam,
    aws_sns as sns,
    aws_events as events,
    aws_events_targets as targets,
    aws_logs as logs,
    aws_cloudwatch as cloudwatch,
    aws_cloudwatch_actions as cw_actions,
    CfnParameter,
    CfnOutput,
)
from constructs import Construct


class InstanceCleanupStack(Stack):
    """
    CDK Stack for tag-scoped EC2 lifecycle cleanup.

    - Stops running instances whose average CPU stays under a threshold
    - Tags stopped instances with AutoStopTime
    - Terminates instances stopped longer than a grace period
    - Configurable dry-run mode and optional SNS report
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Parameters
        dry_run_param = CfnParameter(
            self, "DryRunMode",
            type="String",
            default="true",
            allowed_values=["true", "false"],
            description="[SAFETY] Log actions without stopping, tagging or terminating. Set to 'false' once the logged decisions look right."
        )

        tag_key_param = CfnParameter(
            self, "ProvisioningTagKey",
            type="String",
            default="Provisioner",
            description="[SELECTOR] Tag key identifying instances managed by this policy."
        )

        tag_value_param = CfnParameter(
            self, "ProvisioningTagValue",
            type="String",
            default="Terraform via Semaphore",
            description="[SELECTOR] Tag value identifying instances managed by this policy."
        )

        cpu_threshold_param = CfnParameter(
            self, "CpuThresholdPercent",
            type="Number",
            default=1,
            min_value=0,
            max_value=100,
            description="[POLICY] Running instances with average CPU strictly below this percentage are stopped."
        )

        stop_after_days_param = CfnParameter(
            self, "StopAfterDays",
            type="Number",
            default=1,
            min_value=1,
            max_value=14,
            description="[POLICY] CPU lookback window in days used to judge idleness."
        )

        delete_after_days_param = CfnParameter(
            self, "DeleteAfterDays",
            type="Number",
            default=2,
            min_value=0,
            max_value=180,
            description="[POLICY] Whole days an instance must stay stopped before it is terminated."
        )

        metric_period_param = CfnParameter(
            self, "MetricPeriodSeconds",
            type="Number",
            default=3600,
            min_value=60,
            description="[POLICY] CloudWatch aggregation period in seconds (multiple of 60)."
        )

        schedule_rate_param = CfnParameter(
            self, "ScheduleRateMinutes",
            type="Number",
            default=60,
            min_value=2,
            description="[SCHEDULING] Execution frequency in minutes. Minimum 2 (EventBridge needs the singular unit for 1)."
        )

        log_level_param = CfnParameter(
            self, "LogLevel",
            type="String",
            default="INFO",
            allowed_values=["DEBUG", "INFO", "WARNING", "ERROR"],
            description="[LOGGING] Lambda log level."
        )

        log_retention_param = CfnParameter(
            self, "LogRetentionDays",
            type="Number",
            default=30,
            allowed_values=["1", "3", "7", "14", "30", "60", "90", "120", "180"],
            description="[LOGGING] CloudWatch Logs retention in days."
        )

        # SNS Topic for notifications
        # Note: Subscription must be added manually via AWS Console or CLI
        sns_topic = sns.Topic(
            self, "CleanupNotificationTopic",
            topic_name="InstanceLifecycleCleanupNotifications",
            display_name="Instance Lifecycle Cleanup Notifications"
        )

        # IAM Role for Lambda
        lambda_role = iam.Role(
            self, "InstanceCleanupRole",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AWSLambdaBasicExecutionRole"
                )
            ]
        )

        lambda_role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "ec2:DescribeInstances",
                "ec2:StopInstances",
                "ec2:TerminateInstances",
                "ec2:CreateTags",
                "cloudwatch:GetMetricStatistics",
            ],
            resources=["*"]
        ))

        lambda_role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["sns:Publish"],
            resources=[sns_topic.topic_arn]
        ))

        # Explicit log group so the retention parameter reaches the template
        log_group = logs.LogGroup(
            self, "InstanceCleanupLogGroup",
            retention=logs.RetentionDays.ONE_MONTH
        )
        log_group.node.default_child.retention_in_days = log_retention_param.value_as_number

        # Lambda Function
        cleanup_lambda = lambda_.Function(
            self, "InstanceCleanupLambda",
            description="Stops idle tagged EC2 instances and terminates long-stopped ones",
            runtime=lambda_.Runtime.PYTHON_3_13,
            architecture=lambda_.Architecture.ARM_64,
            handler="instance_cleanup.handler.lambda_handler",
            code=lambda_.Code.from_asset("lambda"),
            role=lambda_role,
            timeout=Duration.seconds(300),
            memory_size=256,
            reserved_concurrent_executions=1,
            log_group=log_group,
            environment={
                "DRY_RUN": dry_run_param.value_as_string,
                "SNS_TOPIC_ARN": sns_topic.topic_arn,
                "TAG_KEY": tag_key_param.value_as_string,
                "TAG_VALUE": tag_value_param.value_as_string,
                "CPU_THRESHOLD_PERCENT": cpu_threshold_param.value_as_string,
                "STOP_AFTER_DAYS": stop_after_days_param.value_as_string,
                "DELETE_AFTER_DAYS": delete_after_days_param.value_as_string,
                "METRIC_PERIOD_SECONDS": metric_period_param.value_as_string,
                "LOG_LEVEL": log_level_param.value_as_string
            }
        )

        # EventBridge Rule (configurable schedule)
        schedule_rule = events.Rule(
            self, "CleanupScheduleRule",
            description="Periodic EC2 instance lifecycle cleanup",
            schedule=events.Schedule.rate(Duration.minutes(schedule_rate_param.value_as_number)),
            enabled=True
        )

        # Failed runs are re-evaluated wholesale on the next schedule
        schedule_rule.add_target(targets.LambdaFunction(
            cleanup_lambda,
            retry_attempts=0,
        ))

        lambda_errors_alarm = cloudwatch.Alarm(
            self, "LambdaErrorsAlarm",
            alarm_name="InstanceLifecycleCleanup-LambdaErrors",
            alarm_description="Alert when the cleanup Lambda run fails",
            metric=cleanup_lambda.metric_errors(
                period=Duration.hours(1),
                statistic="Sum"
            ),
            threshold=1,
            evaluation_periods=1,
            treat_missing_data=cloudwatch.TreatMissingData.NOT_BREACHING
        )
        lambda_errors_alarm.add_alarm_action(cw_actions.SnsAction(sns_topic))

        # Outputs
        CfnOutput(
            self, "LambdaFunctionName",
            description="Name of the Lambda function",
            value=cleanup_lambda.function_name
        )

        CfnOutput(
            self, "SNSTopicArn",
            description="ARN of the SNS topic for notifications",
            value=sns_topic.topic_arn
        )

        CfnOutput(
            self, "DryRunModeOutput",
            description="Current dry-run mode setting",
            value=dry_run_param.value_as_string
        )
