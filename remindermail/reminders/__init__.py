"""Due-reminder pipeline (store client, due filter, dispatcher, runner).

The store client talks to the PostgREST endpoint shared with the web app; the
dispatcher hands rendered messages to a mail transport. Everything runs in a
single synchronous pass per invocation.
"""
