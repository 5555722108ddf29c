"""
Lambda handlers invoked at deployment time.

- get_mail: custom resource returning an account's e-mail address
- subscribe_sqs: custom resource subscribing the aggregation queue to a member topic
- forward_sns_message: forwards queued budget notifications to the central topic
"""
